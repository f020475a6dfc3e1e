"""Configuration management commands."""

import logging
from typing import Annotated

import typer
from rich.table import Table

from vanity.cli._app import get_state
from vanity.cli.errorhandler import handle_cli_errors
from vanity.config import PathsSettings, VanityConfig, find_vanity_config, save_vanity_config
from vanity.logging_setup import console

logger = logging.getLogger(__name__)

config_app = typer.Typer(
    name="config",
    help="Show or create the site configuration",
    no_args_is_help=True,
)


@config_app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective configuration and resolved paths."""
    state = get_state(ctx)
    with handle_cli_errors(debug=state.debug):
        config, paths = state.load()
    config_path = find_vanity_config(paths.site_root)

    table = Table(title="⚙️ Vanity configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Resolved", style="dim")
    table.add_row("site root", "", str(paths.site_root))
    table.add_row("paths.content_dir", config.paths.content_dir, str(paths.content_dir))
    table.add_row("paths.readings_dir", config.paths.readings_dir, str(paths.readings_dir))
    table.add_row("paths.images_dir", config.paths.images_dir, str(paths.images_dir))
    table.add_row("paths.data_dir", config.paths.data_dir, str(paths.data_dir))
    table.add_row("paths.image_web_prefix", config.paths.image_web_prefix, "")
    console.print(table)
    console.print(f"[dim]Config file: {config_path or 'none (defaults)'}[/dim]")


@config_app.command()
def init(
    ctx: typer.Context,
    *,
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing config file")] = False,
) -> None:
    """Write a default .vanity/vanity.toml in the site root."""
    state = get_state(ctx)
    with handle_cli_errors(debug=state.debug):
        config = VanityConfig(paths=PathsSettings())
        config_path = save_vanity_config(config, state.site_root, overwrite=force)
    console.print(f"[green]✓ Wrote {config_path}[/green]")
