"""Terminal implementation of the reading prompters.

Free text and confirmations go through ``typer.prompt`` / ``typer.confirm``;
menus are printed as numbered lists on the shared console. Invalid answers
are re-asked in place so the flows only ever see well-formed input.
"""

from __future__ import annotations

from typing import TypeVar

import typer
from rich.console import Console

from vanity.constants import CoverChoice, CoverUpdateChoice, RereadAction, UpdateAction
from vanity.logging_setup import console as default_console
from vanity.readings.catalog import ReadingEntry
from vanity.readings.covers import validate_cover_url
from vanity.readings.dates import check_date_input, normalize_finished, today_iso_date
from vanity.readings.exceptions import InvalidCoverUrlError
from vanity.readings.flow import BasicInfo, CoverSelection, ReadingMetadata
from vanity.readings.preview import FieldChange, ReadingPreview, render_changes, render_reading_preview
from vanity.readings.rereads import MostRecentReading
from vanity.readings.update import CoverUpdate

T = TypeVar("T")


def _display_date(iso: str | None) -> str:
    finished = normalize_finished(iso)
    return finished.date().isoformat() if finished else "Unknown"


class TerminalPrompter:
    """Asks the operator questions on the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    # -- helpers ---------------------------------------------------------

    def _choose(self, message: str, options: list[tuple[str, T]], default: int = 1) -> T:
        self.console.print(f"[bold]{message}[/bold]")
        for number, (label, _) in enumerate(options, start=1):
            self.console.print(f"  [cyan]{number}[/cyan]) {label}")
        while True:
            picked = typer.prompt("Choose", default=default, type=int)
            if 1 <= picked <= len(options):
                return options[picked - 1][1]
            self.console.print(f"[red]Pick a number between 1 and {len(options)}[/red]")

    def _ask_required(self, message: str, error: str, default: str | None = None) -> str:
        while True:
            value = str(typer.prompt(message, default=default, show_default=default is not None))
            if value.strip():
                return value.strip()
            self.console.print(f"[red]{error}[/red]")

    def _ask_date(self) -> str:
        while True:
            value = str(
                typer.prompt(
                    "When did you finish? (YYYY-MM-DD or press Enter for today)",
                    default=today_iso_date(),
                )
            ).strip()
            error = check_date_input(value) if value else "Date is required"
            if error is None:
                return value
            self.console.print(f"[red]{error}[/red]")

    def _ask_url(self) -> str:
        while True:
            value = str(typer.prompt("Image URL", default="", show_default=False))
            try:
                return validate_cover_url(value)
            except InvalidCoverUrlError as e:
                self.console.print(f"[red]{e}[/red]")

    def _ask_path(self) -> str:
        return self._ask_required("Path to image file", "Path is required")

    # -- add flow --------------------------------------------------------

    def ask_basics(self) -> BasicInfo:
        self.console.print("[cyan]📚 Let's add a new reading...[/cyan]\n")
        title = self._ask_required("Book title", "Title is required")
        author = self._ask_required("Author", "Author is required")
        return BasicInfo(title=title, author=author)

    def ask_reread_action(
        self, title: str, existing: MostRecentReading, next_filename: str
    ) -> RereadAction:
        if existing.count == 1:
            status = f"finished {_display_date(existing.date)}" if existing.date else "currently reading"
            self.console.print(f"\n[yellow]⚠️  '{title}' already tracked ({status}).[/yellow]")
        else:
            self.console.print(
                f"\n[yellow]⚠️  '{title}' already tracked ({existing.count} previous readings).[/yellow]"
            )
        return self._choose(
            "What would you like to do?",
            [
                (f"Add as reread (creates {next_filename})", RereadAction.REREAD),
                ("Update most recent entry", RereadAction.UPDATE),
                ("Cancel", RereadAction.CANCEL),
            ],
        )

    def ask_metadata(self) -> ReadingMetadata:
        finished = typer.confirm("Have you finished this book?", default=False)
        finished_date = self._ask_date() if finished else None
        audiobook = typer.confirm("Is this an audiobook?", default=False)
        favorite = typer.confirm("Mark as favorite?", default=False)
        return ReadingMetadata(
            finished=finished,
            finished_date=finished_date,
            audiobook=audiobook,
            favorite=favorite,
        )

    def ask_cover_image(self) -> CoverSelection:
        choice = self._choose(
            "Add a cover image?",
            [
                ("🔗 URL - Provide an image URL", CoverChoice.URL),
                ("📁 Local - Use a local image file", CoverChoice.LOCAL),
                ("⏭️  Skip - No cover image", CoverChoice.SKIP),
            ],
        )
        if choice is CoverChoice.URL:
            return CoverSelection(choice, self._ask_url())
        if choice is CoverChoice.LOCAL:
            return CoverSelection(choice, self._ask_path())
        return CoverSelection(choice)

    def ask_continue_without_image(self, error: Exception) -> bool:
        self.console.print(f"[red]✖ Failed to process image:[/red] {error}")
        return typer.confirm("Continue without cover image?", default=True)

    def confirm_save(self, preview: ReadingPreview) -> bool:
        self.console.print(render_reading_preview(preview))
        return typer.confirm("Save this reading?", default=True)

    # -- update flow -----------------------------------------------------

    def select_reading(
        self, unfinished: list[ReadingEntry], finished: list[ReadingEntry]
    ) -> str | None:
        options: list[tuple[str, str | None]] = [
            (f"[yellow]○ {e.record.title} - {e.record.author} (currently reading)[/yellow]", e.filename)
            for e in unfinished
        ]
        options += [
            (
                f"[green]✓ {e.record.title} - {e.record.author} "
                f"(finished {_display_date(e.record.finished_iso)})[/green]",
                e.filename,
            )
            for e in finished
        ]
        options.append(("❌ Cancel", None))
        return self._choose("Which reading would you like to update?", options)

    def ask_update_action(self, entry: ReadingEntry) -> UpdateAction:
        record = entry.record
        self.console.print("\n[cyan]📖 Current Reading:[/cyan]")
        self.console.print(f"[dim]   Title: {record.title}[/dim]")
        self.console.print(f"[dim]   Author: {record.author}[/dim]")
        if record.finished:
            self.console.print(f"[dim]   Status: Finished on {record.finished.date().isoformat()}[/dim]")
        else:
            self.console.print("[dim]   Status: Currently reading[/dim]")

        options: list[tuple[str, UpdateAction]] = []
        if not record.is_finished:
            options += [
                ("Mark as finished (today)", UpdateAction.FINISH_TODAY),
                ("Mark as finished (custom date)", UpdateAction.FINISH_CUSTOM),
            ]
        options += [
            ("📖 Update title", UpdateAction.TITLE),
            ("✍️  Update author", UpdateAction.AUTHOR),
            ("🖼️  Update cover image", UpdateAction.COVER),
            ("🎧 Toggle audiobook status", UpdateAction.AUDIOBOOK),
            ("⭐ Toggle favorite status", UpdateAction.FAVORITE),
            ("🗑️  Delete reading", UpdateAction.DELETE),
            ("❌ Cancel", UpdateAction.CANCEL),
        ]
        return self._choose("What would you like to update?", options)

    def ask_text(self, label: str, default: str) -> str:
        return self._ask_required(f"New {label.lower()}", f"{label} is required", default=default)

    def ask_finish_date(self) -> str:
        return self._ask_date()

    def ask_cover_update(self, current: str | None) -> CoverUpdate:
        self.console.print(f"[dim]Current cover: {current or 'None'}[/dim]")
        choice = self._choose(
            "How would you like to update the cover?",
            [
                ("🔗 Enter a new URL", CoverUpdateChoice.URL),
                ("📁 Use a local image file", CoverUpdateChoice.LOCAL),
                ("🗑️  Remove cover image", CoverUpdateChoice.REMOVE),
                ("❌ Cancel", CoverUpdateChoice.CANCEL),
            ],
        )
        if choice is CoverUpdateChoice.URL:
            return CoverUpdate(choice, self._ask_url())
        if choice is CoverUpdateChoice.LOCAL:
            return CoverUpdate(choice, self._ask_path())
        return CoverUpdate(choice)

    def confirm_delete(self, entry: ReadingEntry) -> bool:
        return typer.confirm(
            f"⚠️  Are you sure you want to delete \"{entry.record.title}\"? This cannot be undone.",
            default=False,
        )

    def confirm_changes(self, changes: list[FieldChange]) -> bool:
        self.console.print("\n[cyan]📝 Preview of changes:[/cyan]")
        self.console.print(render_changes(changes))
        return typer.confirm("Save these changes?", default=True)


__all__ = ["TerminalPrompter"]
