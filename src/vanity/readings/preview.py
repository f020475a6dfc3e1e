"""Rich renderables for showing readings to the operator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rich.panel import Panel
from rich.text import Text

from vanity.readings.dates import normalize_finished
from vanity.readings.exceptions import InvalidDateError
from vanity.readings.models import coerce_text

_PREVIEW_WIDTH = 60


@dataclass(frozen=True, slots=True)
class ReadingPreview:
    """What is about to be saved, and where."""

    title: str
    author: str
    finished: bool
    filename: str
    action: str
    cover_image: str | None = None
    audiobook: bool = False
    favorite: bool = False


@dataclass(frozen=True, slots=True)
class FieldChange:
    """One frontmatter field that differs between two versions of a reading."""

    label: str
    before: str
    after: str


def render_reading_preview(preview: ReadingPreview) -> Panel:
    """Build the boxed preview shown before a reading is written."""
    text = Text()
    text.append(preview.title, style="bold")
    text.append("\nby ", style="dim")
    text.append(preview.author)
    text.append("\n\n")
    if preview.finished:
        text.append("✓ Finished", style="green")
    else:
        text.append("○ In Progress", style="yellow")
    if preview.audiobook:
        text.append("\n🎧 Audiobook", style="dim")
    if preview.favorite:
        text.append("\n⭐ Favorite", style="dim")
    if preview.cover_image:
        text.append(f"\nCover: {preview.cover_image}", style="dim")
    text.append(f"\n\n{preview.action} → {preview.filename}", style="dim italic")

    return Panel(
        text,
        title="📚 Reading Preview",
        border_style="magenta",
        padding=(1, 2),
        width=_PREVIEW_WIDTH,
    )


def _display_date(value: Any) -> str:
    try:
        finished = normalize_finished(value)
    except InvalidDateError:
        return str(value)
    return finished.date().isoformat() if finished else "Not finished"


def diff_frontmatter(original: dict[str, Any], updated: dict[str, Any]) -> list[FieldChange]:
    """List the operator-visible differences between two frontmatter mappings."""
    changes: list[FieldChange] = []

    for key, label in (("title", "Title"), ("author", "Author")):
        before, after = coerce_text(original.get(key)), coerce_text(updated.get(key))
        if before != after:
            changes.append(FieldChange(label, before, after))

    before_cover = original.get("coverImage") or "None"
    after_cover = updated.get("coverImage") or "None"
    if before_cover != after_cover:
        changes.append(FieldChange("Cover", str(before_cover), str(after_cover)))

    for key, label in (("audiobook", "Audiobook"), ("favorite", "Favorite")):
        before_flag, after_flag = bool(original.get(key)), bool(updated.get(key))
        if before_flag != after_flag:
            changes.append(FieldChange(label, str(before_flag).lower(), str(after_flag).lower()))

    before_date = _display_date(original.get("finished"))
    after_date = _display_date(updated.get("finished"))
    if before_date != after_date:
        changes.append(FieldChange("Finished", before_date, after_date))

    return changes


def render_changes(changes: list[FieldChange]) -> Text:
    """Render a list of field changes as ``Label: before → after`` lines."""
    text = Text()
    for index, change in enumerate(changes):
        if index:
            text.append("\n")
        text.append(f"  {change.label}: ", style="dim")
        text.append(change.before)
        text.append(" → ", style="dim")
        text.append(change.after, style="bold")
    return text


__all__ = [
    "FieldChange",
    "ReadingPreview",
    "diff_frontmatter",
    "render_changes",
    "render_reading_preview",
]
