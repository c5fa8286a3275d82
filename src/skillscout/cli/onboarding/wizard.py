"""Onboarding wizard orchestrator."""

from pathlib import Path

from rich.console import Console

from skillscout.cli.onboarding.steps import (
    BaseStep,
    CheckWorkspaceStep,
    ConfigureApiStep,
    ConfigureRetrievalStep,
    CreateExampleSkillStep,
    SaveConfigStep,
)


class OnboardingWizard:
    """Guides users through initial configuration."""

    STEPS: list[type[BaseStep]] = [
        CheckWorkspaceStep,
        ConfigureRetrievalStep,
        ConfigureApiStep,
        SaveConfigStep,
        CreateExampleSkillStep,
    ]

    def __init__(self, workspace: Path | None = None):
        self.workspace = workspace or Path.home() / ".skillscout"

    def run(self) -> bool:
        """Run all onboarding steps. Returns True if successful."""
        console = Console()
        state: dict = {}

        console.print("\n[bold cyan]Welcome to skillscout![/bold cyan]")
        console.print("Let's set up your configuration.\n")

        for step_cls in self.STEPS:
            step = step_cls(self.workspace, console)
            if not step.run(state):
                console.print("[yellow]Onboarding cancelled.[/yellow]")
                return False

        console.print("\n[green]Configuration saved![/green]")
        console.print(f"Config file: {self.workspace / 'config.user.yaml'}")
        console.print("Edit this file to make changes.\n")
        return True
