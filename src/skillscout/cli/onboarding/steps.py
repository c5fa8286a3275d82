"""Onboarding step classes."""

from pathlib import Path

import questionary
import yaml
from pydantic import ValidationError
from rich.console import Console

from skillscout.utils.config import Config
from skillscout.utils.def_loader import write_definition

EXAMPLE_SKILL_ID = "example-skill"
EXAMPLE_OVERVIEW = """# Example Skill

Replace this overview with guidance an agent should read first.

Detailed material lives in `references/details.md` and is only loaded
when a query asks for it.
"""
EXAMPLE_REFERENCE = """# Details

Reference documents carry no frontmatter.
"""


class BaseStep:
    """Base class for onboarding steps."""

    def __init__(self, workspace: Path, console: Console):
        self.workspace = workspace
        self.console = console

    def run(self, state: dict) -> bool:
        """Execute step. Return True on success, False to abort."""
        raise NotImplementedError


class CheckWorkspaceStep(BaseStep):
    """Check if workspace exists and prompt for overwrite confirmation."""

    def run(self, state: dict) -> bool:
        config_path = self.workspace / "config.user.yaml"

        if config_path.exists():
            self.console.print(
                f"\n[yellow]Workspace already exists at {self.workspace}[/yellow]"
            )

            proceed = questionary.confirm(
                "This will overwrite your existing configuration. Continue?",
                default=False,
            ).ask()

            return bool(proceed)

        return True


class ConfigureRetrievalStep(BaseStep):
    """Prompt for corpus location and disclosure budget."""

    def run(self, state: dict) -> bool:
        skills_path = questionary.text(
            "Skills directory (relative to workspace):", default="skills"
        ).ask()
        if skills_path is None:
            return False

        size_unit = questionary.select(
            "Measure budgets in:", choices=["lines", "tokens"], default="lines"
        ).ask()
        if size_unit is None:
            return False

        budget = questionary.text(
            "Default budget per session:",
            default="2000",
            validate=lambda v: v.isdigit() and int(v) > 0 or "Enter a positive integer",
        ).ask()
        if budget is None:
            return False

        state["skills_path"] = skills_path
        state["retrieval"] = {"size_unit": size_unit, "default_budget": int(budget)}
        return True


class ConfigureApiStep(BaseStep):
    """Prompt for HTTP API bind address."""

    def run(self, state: dict) -> bool:
        configure = questionary.confirm(
            "Configure the HTTP API bind address?", default=False
        ).ask()
        if not configure:
            return True

        host = questionary.text("Host:", default="127.0.0.1").ask()
        port = questionary.text(
            "Port:",
            default="8000",
            validate=lambda v: v.isdigit() and 0 < int(v) < 65536 or "Invalid port",
        ).ask()
        if host is None or port is None:
            return False

        state["api"] = {"host": host, "port": int(port)}
        return True


class SaveConfigStep(BaseStep):
    """Validate collected settings and write config.user.yaml."""

    def run(self, state: dict) -> bool:
        try:
            config = Config.model_validate({"workspace": self.workspace, **state})
        except ValidationError as e:
            self.console.print(f"[red]Invalid configuration: {e}[/red]")
            return False

        self.workspace.mkdir(parents=True, exist_ok=True)
        config.skills_path.mkdir(parents=True, exist_ok=True)
        config.logging_path.mkdir(parents=True, exist_ok=True)

        with open(self.workspace / "config.user.yaml", "w") as f:
            yaml.dump(state, f, default_flow_style=False, sort_keys=False)

        state["_skills_dir"] = config.skills_path
        return True


class CreateExampleSkillStep(BaseStep):
    """Optionally scaffold one example skill in an empty corpus."""

    def run(self, state: dict) -> bool:
        skills_dir: Path = state.get("_skills_dir", self.workspace / "skills")
        if any(skills_dir.rglob("SKILL.md")):
            return True

        create = questionary.confirm(
            "Create an example skill to start from?", default=True
        ).ask()
        if not create:
            return True

        skill_dir = skills_dir / EXAMPLE_SKILL_ID
        write_definition(
            skill_dir,
            {
                "name": EXAMPLE_SKILL_ID,
                "description": "Example skill showing an overview with one reference",
            },
            EXAMPLE_OVERVIEW,
            "SKILL.md",
        )
        (skill_dir / "references").mkdir(exist_ok=True)
        (skill_dir / "references" / "details.md").write_text(EXAMPLE_REFERENCE)

        self.console.print(f"Created {skill_dir}")
        return True
