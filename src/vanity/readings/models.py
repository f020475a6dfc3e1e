"""Typed view of a reading file's frontmatter."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from vanity.readings.dates import format_iso_timestamp, normalize_finished
from vanity.readings.frontmatter import create_reading_frontmatter


def coerce_text(value: Any) -> str:
    """Return ``value`` as a string, undoing YAML's numeric inference.

    ``title: 1984`` loads as the int ``1984``; titles are always text.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True, slots=True)
class ReadingRecord:
    """Normalized reading metadata.

    ``finished`` is ``None`` while the book is in progress.
    """

    title: str
    author: str
    finished: datetime | None = None
    cover_image: str | None = None
    audiobook: bool = False
    favorite: bool = False

    @classmethod
    def from_frontmatter(cls, frontmatter: dict[str, Any]) -> ReadingRecord:
        """Normalize raw frontmatter values into a record.

        Raises:
            InvalidDateError: if ``finished`` is present but unparseable.

        """
        cover = frontmatter.get("coverImage")
        return cls(
            title=coerce_text(frontmatter.get("title")),
            author=coerce_text(frontmatter.get("author")),
            finished=normalize_finished(frontmatter.get("finished")),
            cover_image=str(cover) if cover else None,
            audiobook=bool(frontmatter.get("audiobook", False)),
            favorite=bool(frontmatter.get("favorite", False)),
        )

    @property
    def is_finished(self) -> bool:
        return self.finished is not None

    @property
    def finished_iso(self) -> str | None:
        return format_iso_timestamp(self.finished) if self.finished else None

    def to_frontmatter(self) -> dict[str, Any]:
        return create_reading_frontmatter(
            self.title,
            self.author,
            self.finished_iso,
            cover_image=self.cover_image,
            audiobook=self.audiobook,
            favorite=self.favorite,
        )


__all__ = ["ReadingRecord", "coerce_text"]
