"""Corpus commands: validate, list, show, query, resolve."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from skillscout.core.context import SharedContext
from skillscout.core.exceptions import DuplicateSkillError, SkillNotFoundError
from skillscout.core.resolver import find_reference
from skillscout.core.skill_def import MatchResult, Query, ResolvedContent
from skillscout.core.skill_loader import SkillLoader
from skillscout.utils.config import Config
from skillscout.utils.logging import setup_logging

console = Console()


def build_context(config: Config) -> SharedContext:
    """Load the configured corpus, exiting with a message on fatal errors."""
    setup_logging(config, console_output=False)
    try:
        return SharedContext(config)
    except DuplicateSkillError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def validate_command(config: Config, path: Path | None = None) -> None:
    """Print one line per violation; exit non-zero if there are any."""
    setup_logging(config, console_output=False)
    root = path or config.skills_path
    if not root.is_dir():
        console.print(f"[red]Corpus directory not found: {root}[/red]")
        raise typer.Exit(1)

    loader = SkillLoader.from_config(config)
    loader.skills_path = root
    issues = loader.validate()

    # Plain echo keeps each violation on exactly one line
    for issue in issues:
        typer.echo(str(issue))

    if issues:
        raise typer.Exit(1)

    skill_count = len(loader.discover())
    console.print(f"[green]Corpus OK: {skill_count} skill(s) in {root}[/green]")


def list_command(config: Config, category: str | None = None) -> None:
    """Show a table of loaded skills."""
    context = build_context(config)
    skills = context.corpus.skills
    if category is not None:
        ids = context.index.by_category(category)
        skills = tuple(s for s in skills if s.id in ids)

    console.print(
        typer.style(f"Available Skills: {len(skills)}", bold=True, fg="cyan")
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("Category")
    table.add_column("Size", justify="right")
    table.add_column("Refs", justify="right")
    table.add_column("Description")
    for skill in skills:
        table.add_row(
            skill.id,
            skill.category or "-",
            str(skill.overview_size),
            str(len(skill.references)),
            skill.description,
        )
    console.print(table)

    if context.corpus.errors:
        console.print(
            f"[yellow]{len(context.corpus.errors)} malformed skill(s) skipped; "
            "run 'skillscout validate' for details.[/yellow]"
        )


def show_command(config: Config, skill_id: str, reference: str | None = None) -> None:
    """Print a skill overview, or one reference with --reference."""
    context = build_context(config)
    try:
        skill = context.index.get(skill_id)
    except SkillNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        console.print("\nAvailable skills:")
        for other in context.index.skill_ids():
            console.print(f"  - {other}")
        raise typer.Exit(1)

    if reference is None:
        typer.echo(skill.overview_body)
        if skill.references:
            console.print("\n[bold]References:[/bold]")
            for ref in skill.references:
                console.print(f"  - {ref.path} ({ref.size_estimate})")
        return

    ref = find_reference(reference, [skill])
    if ref is None:
        console.print(f"[red]Reference not found in {skill.id}: {reference}[/red]")
        raise typer.Exit(1)
    typer.echo(ref.body)


def print_matches(matches: list[MatchResult]) -> None:
    if not matches:
        console.print("[yellow]No matching skills.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Skill", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Matched")
    for rank, match in enumerate(matches, start=1):
        score = f"{match.score:.3f}" + (" (hint)" if match.hinted else "")
        table.add_row(str(rank), match.skill_id, score, ", ".join(match.matched_keywords))
    console.print(table)


def print_resolution(content: ResolvedContent) -> None:
    """Print resolved blocks followed by a budget summary."""
    for block in content.blocks:
        if block.cache_hit:
            console.print(f"[dim]\\[cached] {block.key}[/dim]")
            continue
        console.rule(f"[cyan]{block.key}[/cyan] ({block.cost})")
        typer.echo(block.content)

    console.print(
        f"\n[bold]Budget:[/bold] {content.consumed_budget}/{content.budget}"
    )
    if content.budget_exceeded:
        console.print(
            f"[yellow]Budget exhausted before '{content.pending}' "
            f"(needs {content.pending_cost}). Retry with a larger budget or "
            "fewer references.[/yellow]"
        )


def query_command(config: Config, text: str, hints: list[str]) -> None:
    """Rank skills for a query and print them."""
    context = build_context(config)
    print_matches(context.match(Query(text=text, skill_hints=hints)))


def resolve_command(
    config: Config,
    text: str,
    hints: list[str],
    references: list[str],
    budget: int | None = None,
) -> None:
    """Match and resolve a query in a throwaway session."""
    context = build_context(config)
    session = context.new_session()
    query = Query(text=text, skill_hints=hints, reference_hints=references)

    matches, content = context.resolve(session, query, budget)
    print_matches(matches)
    if matches:
        print_resolution(content)
    context.sessions.end(session.session_id)
