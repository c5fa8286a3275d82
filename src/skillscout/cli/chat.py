"""Chat CLI command for interactive retrieval sessions."""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from skillscout.cli.skills import build_context, print_matches, print_resolution
from skillscout.core.exceptions import SkillscoutError
from skillscout.core.skill_def import Query
from skillscout.utils.config import Config

EXIT_WORDS = ["quit", "exit", "q"]


class ChatLoop:
    """Interactive session: every query discloses into the same session cache."""

    def __init__(self, config: Config, budget: int | None = None):
        self.config = config
        self.budget = budget or config.retrieval.default_budget
        self.console = Console()

        self.context = build_context(config)
        self.session = self.context.new_session()

    def show_welcome(self) -> None:
        self.console.print(
            Panel(
                Text(
                    f"{len(self.context.corpus)} skills loaded, "
                    f"budget {self.budget} {self.config.retrieval.size_unit}",
                    style="bold cyan",
                ),
                title="skillscout",
                border_style="cyan",
            )
        )
        self.console.print(
            "Commands: /status, /reset, /reload. Type 'quit' or 'exit' to end.\n"
        )

    def handle_command(self, command: str) -> bool:
        """Run a session command. Returns False if it is not one."""
        if command == "/status":
            self.console.print(
                f"Consumed {self.session.consumed_budget}/{self.budget}; "
                f"skills: {sorted(self.session.loaded_skill_ids) or '-'}; "
                f"references: {sorted(self.session.loaded_reference_paths) or '-'}"
            )
        elif command == "/reset":
            self.session.reset()
            self.console.print("[yellow]Session cache cleared.[/yellow]")
        elif command == "/reload":
            corpus = self.context.reload()
            self.session = self.context.new_session()
            self.console.print(
                f"[yellow]Corpus reloaded ({len(corpus)} skills), new session.[/yellow]"
            )
        else:
            return False
        return True

    def handle_query(self, text: str) -> None:
        matches, content = self.context.resolve(
            self.session, Query(text=text), self.budget
        )
        print_matches(matches)
        if matches:
            print_resolution(content)

    def run(self) -> None:
        """Run the interactive loop until the user quits."""
        self.show_welcome()
        try:
            while True:
                try:
                    user_input = self.console.input("[bold green]Query:[/bold green] ")
                except (KeyboardInterrupt, EOFError):
                    self.console.print("\n[yellow]Session interrupted.[/yellow]")
                    break

                user_input = user_input.strip()
                if user_input.lower() in EXIT_WORDS:
                    self.console.print("[yellow]Goodbye![/yellow]")
                    break
                if not user_input:
                    continue

                try:
                    if not self.handle_command(user_input):
                        self.handle_query(user_input)
                except SkillscoutError as e:
                    self.console.print(f"[red]Error: {e}[/red]")
        finally:
            self.context.sessions.end(self.session.session_id)


def chat_command(config: Config, budget: int | None = None) -> None:
    """Start interactive chat session."""
    ChatLoop(config, budget=budget).run()
