"""A module for Vanity's command-line interface."""

from vanity.cli.main import app

__all__ = ["app", "main"]


def main() -> None:
    """Entry point for the CLI."""
    app()
