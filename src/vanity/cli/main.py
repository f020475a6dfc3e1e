"""Main Typer application for Vanity."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from vanity import __version__
from vanity.cli._app import CliState, get_state
from vanity.cli.config import config_app
from vanity.cli.errorhandler import handle_cli_errors
from vanity.cli.reading import reading_app
from vanity.export import export_static_data
from vanity.logging_setup import configure_logging, console

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="vanity",
    help="Manage the reading log of a personal site",
    add_completion=False,
    no_args_is_help=True,
)
app.add_typer(reading_app)
app.add_typer(config_app)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"vanity {__version__}")
        raise typer.Exit


@app.callback()
def main(
    ctx: typer.Context,
    site_root: Annotated[
        Path,
        typer.Option("--site-root", help="Site root directory (searched upward for .vanity/vanity.toml)"),
    ] = Path(),
    *,
    debug: Annotated[bool, typer.Option("--debug", help="Verbose logging and full tracebacks")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit"),
    ] = False,
) -> None:
    """Configure logging and remember global options for subcommands."""
    configure_logging(debug=debug)
    ctx.obj = CliState(site_root=site_root.expanduser().resolve(), debug=debug)


@app.command()
def export(
    ctx: typer.Context,
    *,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Regenerate even if content is unchanged")
    ] = False,
) -> None:
    """Publish readings.json for the website.

    Examples:
        vanity export
        vanity export --force
    """
    state = get_state(ctx)
    with handle_cli_errors(debug=state.debug):
        _, paths = state.load()
        report = export_static_data(paths, force=force)

    if report.skipped:
        console.print("[green]✓ Content unchanged, skipping generation (cache hit)[/green]")
        return

    console.print(f"[green]✓ Generated readings.json with {len(report.readings)} readings[/green]")
    console.print(
        f"[green]✓ Detected {report.reread_count} rereads across {report.unique_books} unique books[/green]"
    )
