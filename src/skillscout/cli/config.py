"""Config command: show or update workspace settings."""

from typing import Any

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console

from skillscout.utils.config import Config

console = Console()


def lookup(config: Config, key: str) -> Any:
    """Return the value at a dotted key, raising KeyError if it does not exist."""
    current: Any = config.model_dump(mode="json")
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            raise KeyError(key)
        current = current[part]
    return current


def config_command(
    config: Config,
    key: str | None = None,
    value: str | None = None,
    runtime: bool = False,
) -> None:
    """Print the whole config, one key, or set a key from a YAML scalar."""
    if key is None:
        data = config.model_dump(mode="json", exclude={"workspace"})
        typer.echo(yaml.safe_dump(data, sort_keys=False).rstrip())
        return

    try:
        current = lookup(config, key)
    except KeyError:
        console.print(f"[red]Unknown config key: {key}[/red]")
        raise typer.Exit(1)

    if value is None:
        if isinstance(current, dict):
            typer.echo(yaml.safe_dump(current, sort_keys=False).rstrip())
        else:
            typer.echo(current)
        return

    parsed = yaml.safe_load(value)
    target = "config.runtime.yaml" if runtime else "config.user.yaml"
    try:
        if runtime:
            config.set_runtime(key, parsed)
        else:
            config.set_user(key, parsed)
    except ValidationError as e:
        console.print(f"[red]Invalid value for {key}: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Set {key} = {parsed!r} in {target}[/green]")
