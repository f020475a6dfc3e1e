"""Scanning a readings directory for rereads of the same work.

A reread group is every file sharing a base slug, in canonical order: the base
file first, then numbered files by ascending sequence. A file's read count is
its 1-based position in that order, and the most recent reading is the last
entry, never the most recently modified file. Every query re-scans the
directory; nothing is cached.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from pathlib import Path

from vanity.constants import MARKDOWN_EXTENSION
from vanity.exceptions import VanityError
from vanity.readings.dates import finished_to_iso
from vanity.readings.frontmatter import read_reading
from vanity.readings.slugs import (
    SlugInfo,
    canonical_sort_key,
    is_reading_filename,
    parse_slug,
    reading_stem,
    sequence_for_base,
)

logger = logging.getLogger(__name__)

RereadMap = dict[str, list[str]]


@dataclass(frozen=True, slots=True)
class MostRecentReading:
    """Summary of the latest read of a work."""

    filename: str
    date: str | None
    count: int


def list_reading_files(readings_dir: Path) -> list[str]:
    """Return every filename in ``readings_dir`` that follows the reading contract.

    A missing directory is treated as empty.
    """
    if not readings_dir.is_dir():
        return []
    return sorted(
        entry.name
        for entry in readings_dir.iterdir()
        if entry.is_file() and is_reading_filename(entry.name)
    )


def find_existing_readings(base_slug: str, readings_dir: Path) -> list[str]:
    """Return all reading files for exactly ``base_slug``, in canonical order.

    ``1984`` matches ``1984.md`` and ``1984-02.md`` but never ``1984-redux.md``.
    Grouping is the same as :func:`build_reread_map`, so the CLI and the
    published data always agree on a file's read count.
    """
    return list(build_reread_map(list_reading_files(readings_dir)).get(base_slug, []))


def _has_numbered_file(base_slug: str, stems: Collection[str], *, excluding: str) -> bool:
    return any(
        stem != excluding and (sequence_for_base(stem, base_slug) or 1) > 1 for stem in stems
    )


def resolve_slug(stem: str, stems: Collection[str]) -> SlugInfo | None:
    """Resolve ``stem`` to its base slug and sequence given its neighbours.

    A trailing ``-<digits>`` only marks a reread when the shorter base is
    otherwise present: its base file exists, or another numbered file shares
    it. ``catch-22`` alone is the first read of "Catch-22"; next to
    ``catch.md`` it is read 22 of "catch". A stem that has numbered files of
    its own is always a base.
    """
    parsed = parse_slug(stem)
    if parsed is None:
        return None
    if parsed.base_slug == stem or _has_numbered_file(stem, stems, excluding=stem):
        return SlugInfo(base_slug=stem, sequence=1)
    if parsed.base_slug in stems or _has_numbered_file(parsed.base_slug, stems, excluding=stem):
        return parsed
    return SlugInfo(base_slug=stem, sequence=1)


def build_reread_map(filenames: Iterable[str]) -> RereadMap:
    """Group filenames by base slug, each group in canonical order.

    Names outside the reading filename contract are ignored.
    """
    names = [name for name in filenames if is_reading_filename(name)]
    stems = {reading_stem(name) for name in names}

    reread_map: RereadMap = {}
    for filename in names:
        resolved = resolve_slug(reading_stem(filename), stems)
        if resolved is None:
            continue
        reread_map.setdefault(resolved.base_slug, []).append(filename)

    for base_slug, files in reread_map.items():
        files.sort(key=lambda name, base=base_slug: canonical_sort_key(name, base))
    return reread_map


def base_slug_index(reread_map: RereadMap) -> dict[str, str]:
    """Map every filename in ``reread_map`` to the base slug of its group."""
    return {filename: base_slug for base_slug, files in reread_map.items() for filename in files}


def compute_read_count(filename: str, reread_map: RereadMap) -> int:
    """Return the 1-based position of ``filename`` in its reread group.

    Accepts a filename or a bare stem. Files missing from the map count as a
    first read.
    """
    stem = reading_stem(filename)
    parsed = parse_slug(stem)
    if parsed is None:
        return 1

    target = f"{stem}{MARKDOWN_EXTENSION}"
    # A stem is grouped either under itself or under its parsed base.
    for base_slug in (stem, parsed.base_slug):
        files = reread_map.get(base_slug, [])
        if target in files:
            return files.index(target) + 1
    return 1


def get_most_recent_reading(base_slug: str, readings_dir: Path) -> MostRecentReading | None:
    """Describe the latest read of ``base_slug``, or None if it was never read.

    An unreadable latest file still reports the count, without a date.
    """
    existing = find_existing_readings(base_slug, readings_dir)
    if not existing:
        return None

    latest = existing[-1]
    try:
        document = read_reading(readings_dir / latest)
        date = finished_to_iso(document.frontmatter.get("finished"))
    except (OSError, VanityError) as exc:
        logger.warning("Could not read %s: %s", latest, exc)
        date = None

    return MostRecentReading(filename=latest, date=date, count=len(existing))


__all__ = [
    "MostRecentReading",
    "RereadMap",
    "base_slug_index",
    "build_reread_map",
    "compute_read_count",
    "find_existing_readings",
    "get_most_recent_reading",
    "list_reading_files",
    "resolve_slug",
]
