"""CLI error handling utilities."""

from collections.abc import Generator
from contextlib import contextmanager

import typer

from vanity.config.exceptions import ConfigError
from vanity.exceptions import NotFoundError, SecurityRejection, ValidationError, VanityError
from vanity.logging_setup import console
from vanity.readings.exceptions import CoverImageProcessingError


@contextmanager
def handle_cli_errors(*, debug: bool = False) -> Generator[None, None, None]:
    """Context manager to handle CLI errors gracefully.

    Args:
        debug: If True, re-raise the original exception. If False, print a
            user-friendly error and exit with status 1.

    """
    try:
        yield
    except (KeyboardInterrupt, SystemExit, typer.Exit, typer.Abort):
        raise
    except SecurityRejection as e:
        if debug:
            raise
        console.print(f"[bold red]🛡️ Rejected:[/bold red] {e}")
        raise typer.Exit(1) from e
    except ValidationError as e:
        if debug:
            raise
        console.print(f"[bold red]✖ Invalid input:[/bold red] {e}")
        raise typer.Exit(1) from e
    except NotFoundError as e:
        if debug:
            raise
        console.print(f"[bold red]🔍 Not found:[/bold red] {e}")
        raise typer.Exit(1) from e
    except CoverImageProcessingError as e:
        if debug:
            raise
        console.print(f"[bold red]🖼️ Image processing failed:[/bold red] {e}")
        raise typer.Exit(1) from e
    except ConfigError as e:
        if debug:
            raise
        console.print(f"[bold red]⚙️ Configuration Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except VanityError as e:
        if debug:
            raise
        console.print(f"[bold red]✖ Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except Exception as e:
        if debug:
            console.print_exception(show_locals=False)
            raise typer.Exit(1) from e

        console.print(f"[bold red]💥 An unexpected error occurred:[/bold red] {e}")
        console.print("[dim]Run with [bold]--debug[/bold] for more details.[/dim]")
        raise typer.Exit(1) from e
