"""Loading every reading in a directory with its reread identity.

Each file is parsed independently: one unreadable file is recorded as a
failure and left out, and the rest still load. Read counts come from the
directory listing, so a file that fails to parse still occupies its place in
its reread group.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from vanity.exceptions import VanityError
from vanity.readings.frontmatter import read_reading
from vanity.readings.models import ReadingRecord
from vanity.readings.rereads import (
    RereadMap,
    base_slug_index,
    build_reread_map,
    compute_read_count,
    list_reading_files,
)
from vanity.readings.slugs import reading_stem

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReadingEntry:
    """A parsed reading file plus the identity derived from its name."""

    filename: str
    slug: str
    base_slug: str
    read_count: int
    record: ReadingRecord


@dataclass(frozen=True, slots=True)
class CatalogFailure:
    filename: str
    error: str


@dataclass(slots=True)
class ReadingCatalog:
    entries: list[ReadingEntry] = field(default_factory=list)
    failures: list[CatalogFailure] = field(default_factory=list)
    reread_map: RereadMap = field(default_factory=dict)


def load_catalog(readings_dir: Path) -> ReadingCatalog:
    """Parse every reading file in ``readings_dir``."""
    filenames = list_reading_files(readings_dir)
    reread_map = build_reread_map(filenames)
    bases = base_slug_index(reread_map)
    catalog = ReadingCatalog(reread_map=reread_map)

    for filename in filenames:
        slug = reading_stem(filename)
        try:
            document = read_reading(readings_dir / filename)
            record = ReadingRecord.from_frontmatter(document.frontmatter)
        except (OSError, VanityError) as exc:
            logger.warning("Skipping %s: %s", filename, exc)
            catalog.failures.append(CatalogFailure(filename=filename, error=str(exc)))
            continue

        catalog.entries.append(
            ReadingEntry(
                filename=filename,
                slug=slug,
                base_slug=bases.get(filename, slug),
                read_count=compute_read_count(filename, reread_map),
                record=record,
            )
        )

    return catalog


_EPOCH = datetime.min.replace(tzinfo=UTC)


def sort_by_finished(entries: Iterable[ReadingEntry]) -> list[ReadingEntry]:
    """Most recently finished first; in-progress readings last.

    The sort is stable, so ties keep their incoming order.
    """
    entries = list(entries)
    finished = sorted(
        (e for e in entries if e.record.finished is not None),
        key=lambda e: e.record.finished or _EPOCH,
        reverse=True,
    )
    in_progress = [e for e in entries if e.record.finished is None]
    return finished + in_progress


__all__ = ["CatalogFailure", "ReadingCatalog", "ReadingEntry", "load_catalog", "sort_by_finished"]
