"""Filename conventions for reading files.

Every reading lives in ``<base-slug>.md`` (the first read) or
``<base-slug>-<NN>.md`` (a reread, ``NN >= 2``, zero-padded to two digits).
A name ending in digits is ambiguous on its own (``catch-22.md`` may be the
first read of "Catch-22" or read 22 of "catch"); :mod:`vanity.readings.rereads`
settles that against the rest of the directory. Nothing here touches the
filesystem.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from unicodedata import normalize

from vanity.constants import MARKDOWN_EXTENSION
from vanity.readings.exceptions import EmptyTitleError, InvalidSlugError

# Directory contract: anything not matching is ignored by the scanner.
READING_FILENAME_PATTERN = re.compile(r"^[a-z0-9-]+(-\d+)?\.md$")
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

_SEQUENCE_SUFFIX = re.compile(r"-(\d+)$")
_DIGITS = re.compile(r"[0-9]+")
_APOSTROPHES = re.compile(r"['’‘`]")
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")

SEQUENCE_WIDTH = 2


@dataclass(frozen=True, slots=True)
class SlugInfo:
    """Identity derived from a reading filename stem."""

    base_slug: str
    sequence: int


def slugify(title: str) -> str:
    """Convert a title into the base slug shared by all reads of that work.

    Examples:
        >>> slugify("War & Peace")
        'war-and-peace'
        >>> slugify("Don't Make Me Think")
        'dont-make-me-think'
        >>> slugify("Cien años de soledad")
        'cien-anos-de-soledad'
        >>> slugify(1984)
        '1984'

    Raises:
        EmptyTitleError: if the title is empty or whitespace-only.
        InvalidSlugError: if nothing alphanumeric survives normalization.

    """
    text = "" if title is None else str(title)
    if not text.strip():
        raise EmptyTitleError

    text = text.replace("&", " and ")
    text = _APOSTROPHES.sub("", text)
    normalized = normalize("NFKD", text).encode("ascii", "ignore").decode("ascii").lower()

    slug = _NON_ALPHANUMERIC.sub("-", normalized).strip("-")
    if not slug:
        raise InvalidSlugError(text.strip())
    return slug


def ensure_slug(slug: str) -> str:
    """Return ``slug`` unchanged if it is a well-formed slug, raise otherwise."""
    if not isinstance(slug, str) or not SLUG_PATTERN.match(slug):
        raise InvalidSlugError(str(slug))
    return slug


def reading_stem(filename: str) -> str:
    """Strip the markdown extension from a reading filename."""
    return filename.removesuffix(MARKDOWN_EXTENSION)


def parse_slug(stem: str | None) -> SlugInfo | None:
    """Split a filename stem into its base slug and read sequence.

    A stem without a numeric suffix is the base file, sequence 1.

    Examples:
        >>> parse_slug("gatsby")
        SlugInfo(base_slug='gatsby', sequence=1)
        >>> parse_slug("how-to-read-a-book-03")
        SlugInfo(base_slug='how-to-read-a-book', sequence=3)

    """
    if not stem or not isinstance(stem, str):
        return None

    match = _SEQUENCE_SUFFIX.search(stem)
    if match is None:
        return SlugInfo(base_slug=stem, sequence=1)

    base_slug = stem[: match.start()]
    if not base_slug:
        return None
    return SlugInfo(base_slug=base_slug, sequence=int(match.group(1)))


def is_reading_filename(filename: str) -> bool:
    """Return True when ``filename`` follows the reading directory contract."""
    return bool(READING_FILENAME_PATTERN.match(filename))


def sequence_for_base(stem: str, base_slug: str) -> int | None:
    """Return the read sequence ``stem`` records for ``base_slug``, or None.

    Unlike :func:`parse_slug` this is relative to a known base, so the base
    file of ``fahrenheit-451`` is sequence 1, not 451.

    Examples:
        >>> sequence_for_base("fahrenheit-451", "fahrenheit-451")
        1
        >>> sequence_for_base("fahrenheit-451-02", "fahrenheit-451")
        2
        >>> sequence_for_base("dune-messiah", "dune") is None
        True

    """
    if stem == base_slug:
        return 1
    prefix = f"{base_slug}-"
    if not stem.startswith(prefix):
        return None
    suffix = stem[len(prefix) :]
    if not _DIGITS.fullmatch(suffix):
        return None
    return int(suffix)


def filename_sequence(filename: str, base_slug: str | None = None) -> int:
    """Return the read sequence encoded in ``filename`` (1 for a base file).

    With ``base_slug`` the sequence is read relative to that base.
    """
    stem = reading_stem(filename)
    if base_slug is not None:
        sequence = sequence_for_base(stem, base_slug)
        if sequence is not None:
            return sequence
    info = parse_slug(stem)
    return info.sequence if info else 1


def canonical_sort_key(filename: str, base_slug: str | None = None) -> tuple[int, int]:
    """Sort key placing the base file first, then numbered files ascending."""
    stem = reading_stem(filename)
    if base_slug is not None:
        return (0 if stem == base_slug else 1, filename_sequence(filename, base_slug))
    match = _SEQUENCE_SUFFIX.search(stem)
    if match is None:
        return (0, 1)
    return (1, int(match.group(1)))


def format_sequence(sequence: int) -> str:
    """Zero-pad a sequence to at least two digits (``2`` -> ``02``, ``100`` -> ``100``)."""
    return f"{sequence:0{SEQUENCE_WIDTH}d}"


def reading_filename(base_slug: str, sequence: int = 1) -> str:
    """Build the filename for ``sequence`` of ``base_slug``."""
    if sequence <= 1:
        return f"{base_slug}{MARKDOWN_EXTENSION}"
    return f"{base_slug}-{format_sequence(sequence)}{MARKDOWN_EXTENSION}"


def allocate_next_filename(base_slug: str, existing_filenames: Iterable[str]) -> str:
    """Return the filename for the next read of ``base_slug``.

    The next sequence is always one past the highest existing sequence; gaps
    left by missing files are never filled.

    Examples:
        >>> allocate_next_filename("1984", [])
        '1984.md'
        >>> allocate_next_filename("1984", ["1984.md"])
        '1984-02.md'
        >>> allocate_next_filename("1984", ["1984.md", "1984-04.md"])
        '1984-05.md'
        >>> allocate_next_filename("catch-22", ["catch-22.md"])
        'catch-22-02.md'

    """
    sequences = [
        sequence
        for sequence in (sequence_for_base(reading_stem(name), base_slug) for name in existing_filenames)
        if sequence is not None
    ]
    if not sequences:
        return reading_filename(base_slug)
    # An existing group always counts as having read 1, even without its base file.
    return reading_filename(base_slug, max(1, *sequences) + 1)


__all__ = [
    "READING_FILENAME_PATTERN",
    "SlugInfo",
    "allocate_next_filename",
    "canonical_sort_key",
    "ensure_slug",
    "filename_sequence",
    "format_sequence",
    "is_reading_filename",
    "parse_slug",
    "reading_filename",
    "reading_stem",
    "sequence_for_base",
    "slugify",
]
