"""CLI commands for managing readings."""

import logging
from typing import Annotated

import typer
from rich.table import Table

from vanity.cli._app import get_state
from vanity.cli.errorhandler import handle_cli_errors
from vanity.constants import FlowOutcome
from vanity.logging_setup import console
from vanity.readings.catalog import load_catalog, sort_by_finished
from vanity.readings.flow import AddReadingFlow
from vanity.readings.prompts import TerminalPrompter
from vanity.readings.update import UpdateReadingFlow
from vanity.readings.validation import validate_reread_sequences

logger = logging.getLogger(__name__)

reading_app = typer.Typer(
    name="reading",
    help="Add, update and inspect readings",
    no_args_is_help=True,
)


@reading_app.command()
def add(ctx: typer.Context) -> None:
    """Add a reading, or record a reread of one already tracked."""
    state = get_state(ctx)
    with handle_cli_errors(debug=state.debug):
        _, paths = state.load()
        flow = AddReadingFlow(
            prompter=TerminalPrompter(console),
            readings_dir=paths.readings_dir,
            images_dir=paths.images_dir,
            image_web_prefix=paths.image_web_prefix,
        )
        result = flow.run()

    if result.outcome is FlowOutcome.CANCELLED:
        console.print("[yellow]✖ Reading creation cancelled.[/yellow]")
        return
    title = (result.frontmatter or {}).get("title", "")
    console.print(f'\n[green]✅ Reading "{title}" saved to {result.filename}[/green]')


@reading_app.command()
def update(ctx: typer.Context) -> None:
    """Edit or delete an existing reading."""
    state = get_state(ctx)
    with handle_cli_errors(debug=state.debug):
        _, paths = state.load()
        flow = UpdateReadingFlow(
            prompter=TerminalPrompter(console),
            readings_dir=paths.readings_dir,
            images_dir=paths.images_dir,
            image_web_prefix=paths.image_web_prefix,
        )
        result = flow.run()

    match result.outcome:
        case FlowOutcome.UPDATED:
            console.print(f"\n[green]✅ Successfully updated {result.filename}[/green]")
        case FlowOutcome.DELETED:
            console.print(f"\n[green]✅ Successfully deleted {result.filename}[/green]")
        case FlowOutcome.CANCELLED:
            console.print("[yellow]✖ Update cancelled.[/yellow]")
        case _:
            console.print("[yellow]No changes made.[/yellow]")


@reading_app.command(name="list")
def list_readings(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Show the N most recent readings"),
    ] = 10,
) -> None:
    """Show recent readings with their read counts.

    Examples:
        vanity reading list
        vanity reading list -n 25
    """
    state = get_state(ctx)
    with handle_cli_errors(debug=state.debug):
        _, paths = state.load()
        catalog = load_catalog(paths.readings_dir)

    if not catalog.entries:
        console.print("[yellow]No readings found.[/yellow]")
        return

    ordered = sort_by_finished(catalog.entries)
    shown = ordered[:limit]

    table = Table(title=f"📚 Recent Readings (showing {len(shown)} of {len(ordered)})")
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Status")
    table.add_column("⭐", justify="center")
    table.add_column("Read #", justify="right")

    for entry in shown:
        record = entry.record
        status = (
            f"[green]✓ {record.finished.date().isoformat()}[/green]"
            if record.finished
            else "[yellow]○ Reading[/yellow]"
        )
        table.add_row(
            record.title,
            record.author,
            status,
            "⭐" if record.favorite else "",
            str(entry.read_count),
        )

    console.print(table)
    finished = sum(1 for e in ordered if e.record.is_finished)
    console.print(f"[dim]Total: {finished} finished, {len(ordered) - finished} in progress[/dim]")


@reading_app.command()
def check(ctx: typer.Context) -> None:
    """Report gaps and other oddities in reread numbering."""
    state = get_state(ctx)
    with handle_cli_errors(debug=state.debug):
        _, paths = state.load()
        catalog = load_catalog(paths.readings_dir)
    advisories = validate_reread_sequences(catalog.reread_map)

    for failure in catalog.failures:
        console.print(f"[red]✖ {failure.filename}: {failure.error}[/red]")
    if not advisories:
        console.print(f"[green]✓ No sequence issues across {len(catalog.reread_map)} books[/green]")
        return

    for advisory in advisories:
        console.print(f"[yellow]⚠️  {advisory}[/yellow]")
    console.print(f"[dim]{len(advisories)} advisory finding(s); nothing was changed.[/dim]")
