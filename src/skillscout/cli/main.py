"""CLI interface for skillscout using Typer."""

from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console

from skillscout.cli.chat import chat_command
from skillscout.cli.config import config_command
from skillscout.cli.onboarding import OnboardingWizard
from skillscout.cli.server import server_command
from skillscout.cli.skills import (
    list_command,
    query_command,
    resolve_command,
    show_command,
    validate_command,
)
from skillscout.utils.config import Config

app = typer.Typer(
    name="skillscout",
    help="Skillscout: skill discovery and progressive-disclosure retrieval",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()

DEFAULT_WORKSPACE = Path.home() / ".skillscout"


def load_config(ctx: typer.Context) -> Config:
    """Load configuration for the selected workspace, exiting on errors."""
    workspace = ctx.obj["workspace"]
    try:
        return Config.load(workspace)
    except (ValidationError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    workspace: Path = typer.Option(
        DEFAULT_WORKSPACE,
        "--workspace",
        "-w",
        help="Path to workspace directory",
    ),
) -> None:
    """
    Skillscout: skill discovery and progressive-disclosure retrieval.

    Configuration is loaded from ~/.skillscout/ by default.
    Use --workspace to specify a custom workspace directory.
    """
    ctx.ensure_object(dict)
    ctx.obj["workspace"] = workspace


@app.command()
def init(ctx: typer.Context) -> None:
    """Initialize skillscout configuration with interactive onboarding."""
    wizard = OnboardingWizard(workspace=ctx.obj["workspace"])
    if not wizard.run():
        raise typer.Exit(1)


@app.command()
def validate(
    ctx: typer.Context,
    path: Annotated[
        Path | None,
        typer.Argument(help="Corpus root (defaults to the configured skills_path)"),
    ] = None,
) -> None:
    """Check a corpus for malformed skills and duplicate ids."""
    validate_command(load_config(ctx), path)


@app.command("list")
def list_skills(
    ctx: typer.Context,
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Only this category")
    ] = None,
) -> None:
    """List all loaded skills."""
    list_command(load_config(ctx), category)


@app.command()
def show(
    ctx: typer.Context,
    skill_id: Annotated[str, typer.Argument(help="Skill id")],
    reference: Annotated[
        str | None,
        typer.Option("--reference", "-r", help="Reference path or file stem"),
    ] = None,
) -> None:
    """Print a skill overview or one of its references."""
    show_command(load_config(ctx), skill_id, reference)


@app.command()
def query(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="Free-text query")],
    hint: Annotated[
        list[str] | None,
        typer.Option("--hint", "-s", help="Explicit skill id (repeatable)"),
    ] = None,
) -> None:
    """Rank skills for a query."""
    query_command(load_config(ctx), text, hint or [])


@app.command()
def resolve(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="Free-text query")],
    hint: Annotated[
        list[str] | None,
        typer.Option("--hint", "-s", help="Explicit skill id (repeatable)"),
    ] = None,
    ref: Annotated[
        list[str] | None,
        typer.Option("--ref", "-r", help="Requested reference (repeatable)"),
    ] = None,
    budget: Annotated[
        int | None, typer.Option("--budget", "-b", min=1, help="Size budget")
    ] = None,
) -> None:
    """Match a query and print the content it discloses."""
    resolve_command(load_config(ctx), text, hint or [], ref or [], budget)


@app.command()
def chat(
    ctx: typer.Context,
    budget: Annotated[
        int | None, typer.Option("--budget", "-b", min=1, help="Session budget")
    ] = None,
) -> None:
    """Start an interactive retrieval session."""
    chat_command(load_config(ctx), budget)


@app.command("config")
def config_cmd(
    ctx: typer.Context,
    key: Annotated[
        str | None, typer.Argument(help="Dotted key, e.g. retrieval.default_budget")
    ] = None,
    value: Annotated[str | None, typer.Argument(help="New value (YAML scalar)")] = None,
    runtime: Annotated[
        bool, typer.Option("--runtime", help="Write to config.runtime.yaml")
    ] = False,
) -> None:
    """Show configuration, or set one key."""
    config_command(load_config(ctx), key, value, runtime)


@app.command("serve")
def serve(
    ctx: typer.Context,
    host: Annotated[str | None, typer.Option("--host", help="Bind host")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Bind port")] = None,
) -> None:
    """Start the HTTP API server."""
    server_command(load_config(ctx), host, port)


if __name__ == "__main__":
    app()
