"""Generate the static ``readings.json`` the website reads at build time.

Every reading file is loaded, tagged with its ``baseSlug`` and ``readCount``
using the same grouping the CLI uses, and written as one JSON document. A
file that cannot be parsed is logged and left out; the rest still publish.

A hash of all markdown content is kept next to the output so an unchanged
content tree skips regeneration.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from vanity.config.settings import SitePaths
from vanity.readings.catalog import CatalogFailure, ReadingEntry, load_catalog, sort_by_finished
from vanity.readings.rereads import list_reading_files
from vanity.readings.validation import SequenceAdvisory, log_advisories, validate_reread_sequences

logger = logging.getLogger(__name__)

# Bump when the published schema changes so cached output is regenerated.
GENERATOR_VERSION = "2"

READINGS_FILE = "readings.json"
HASH_FILE = ".content-hash"

DEFAULT_TITLE = "Untitled"
DEFAULT_AUTHOR = "Unknown Author"


@dataclass
class ExportReport:
    """What an export run produced."""

    readings: list[dict[str, Any]] = field(default_factory=list)
    advisories: list[SequenceAdvisory] = field(default_factory=list)
    failures: list[CatalogFailure] = field(default_factory=list)
    skipped: bool = False
    output_path: Path | None = None

    @property
    def reread_count(self) -> int:
        return sum(1 for r in self.readings if r["readCount"] > 1)

    @property
    def unique_books(self) -> int:
        return len({r["baseSlug"] for r in self.readings})


def calculate_content_hash(content_dir: Path) -> str:
    """SHA-256 over the generator version and every markdown file, in path order.

    Each file contributes its relative path as well as its bytes, so renaming a
    reading (which changes its slug and read count) invalidates the cache.
    """
    digest = hashlib.sha256()
    digest.update(f"v{GENERATOR_VERSION}".encode())
    if content_dir.is_dir():
        for path in sorted(content_dir.rglob("*.md")):
            if path.is_file():
                digest.update(path.relative_to(content_dir).as_posix().encode())
                digest.update(b"\0")
                digest.update(path.read_bytes())
    return digest.hexdigest()


def should_skip_generation(content_dir: Path, data_dir: Path) -> bool:
    """Return True when the output exists and the content hash is unchanged."""
    hash_file = data_dir / HASH_FILE
    if not (data_dir / READINGS_FILE).exists() or not hash_file.exists():
        return False
    stored = hash_file.read_text(encoding="utf-8").strip()
    return stored == calculate_content_hash(content_dir)


def _published_entry(entry: ReadingEntry, reading_id: int) -> dict[str, Any]:
    record = entry.record
    return {
        "id": reading_id,
        "slug": entry.slug,
        "title": record.title or DEFAULT_TITLE,
        "author": record.author or DEFAULT_AUTHOR,
        "finishedDate": record.finished_iso,
        "coverImageSrc": record.cover_image,
        "audiobook": record.audiobook,
        "favorite": record.favorite,
        "readCount": entry.read_count,
        "baseSlug": entry.base_slug,
    }


def generate_readings_data(readings_dir: Path, data_dir: Path) -> ExportReport:
    """Write ``readings.json`` for every reading in ``readings_dir``.

    IDs follow the sorted directory listing, starting at 1, so a failing file
    does not shift the IDs of the others.
    """
    catalog = load_catalog(readings_dir)
    advisories = validate_reread_sequences(catalog.reread_map)
    log_advisories(advisories)

    ids = {name: index for index, name in enumerate(list_reading_files(readings_dir), start=1)}
    readings = [_published_entry(e, ids[e.filename]) for e in sort_by_finished(catalog.entries)]

    data_dir.mkdir(parents=True, exist_ok=True)
    output_path = data_dir / READINGS_FILE
    payload = {"data": readings, "totalCount": len(readings), "hasMore": False}
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

    report = ExportReport(
        readings=readings,
        advisories=advisories,
        failures=catalog.failures,
        output_path=output_path,
    )
    logger.info("Generated %s with %d readings", READINGS_FILE, len(readings))
    logger.info("Detected %d rereads across %d unique books", report.reread_count, report.unique_books)
    if catalog.failures:
        logger.warning("%d reading file(s) could not be published", len(catalog.failures))
    return report


def export_static_data(paths: SitePaths, *, force: bool = False) -> ExportReport:
    """Regenerate the published data unless the content is unchanged."""
    if not force and should_skip_generation(paths.content_dir, paths.data_dir):
        logger.info("Content unchanged, skipping generation (cache hit)")
        return ExportReport(skipped=True, output_path=paths.data_dir / READINGS_FILE)

    report = generate_readings_data(paths.readings_dir, paths.data_dir)
    (paths.data_dir / HASH_FILE).write_text(calculate_content_hash(paths.content_dir), encoding="utf-8")
    return report


__all__ = [
    "GENERATOR_VERSION",
    "HASH_FILE",
    "READINGS_FILE",
    "ExportReport",
    "calculate_content_hash",
    "export_static_data",
    "generate_readings_data",
    "should_skip_generation",
]
