"""Reading files as YAML frontmatter plus a markdown body.

A reading file is the unit of persistence: it is read whole and rewritten
whole. The block is split and loaded by python-frontmatter's YAML handler;
field types come back exactly as PyYAML resolves them (a bare
``title: 1984`` is an int, an unquoted timestamp is a ``datetime``); use
:class:`vanity.readings.models.ReadingRecord` to get normalized values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import frontmatter
import yaml

from vanity.readings.exceptions import MalformedFrontmatterError, ReadingNotFoundError

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"

# Known fields are written in this order; anything else follows alphabetically.
FIELD_ORDER: tuple[str, ...] = ("title", "author", "finished", "coverImage", "audiobook", "favorite")

_YAML_HANDLER = frontmatter.YAMLHandler()


@dataclass(slots=True)
class ReadingDocument:
    """Raw frontmatter mapping and markdown body of one reading file."""

    frontmatter: dict[str, Any] = field(default_factory=dict)
    body: str = ""


def parse_reading(content: str, *, source: Path | str = "<string>") -> ReadingDocument:
    """Split markdown ``content`` into frontmatter and body.

    Content without a leading ``---`` line has no frontmatter and is returned as
    body only.

    Raises:
        MalformedFrontmatterError: if the frontmatter block is unterminated, is
            not valid YAML, or is not a mapping.

    """
    text = content.lstrip("\ufeff")
    if not _YAML_HANDLER.detect(text):
        return ReadingDocument(frontmatter={}, body=content.strip())

    try:
        yaml_content, body = _YAML_HANDLER.split(text)
    except ValueError as exc:
        raise MalformedFrontmatterError(source, "missing closing '---' delimiter") from exc

    # PyYAML raises a bare ValueError for impossible timestamps such as 2024-13-45.
    try:
        data = _YAML_HANDLER.load(yaml_content)
    except (yaml.YAMLError, ValueError) as exc:
        raise MalformedFrontmatterError(source, str(exc)) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedFrontmatterError(source, f"expected a mapping, got {type(data).__name__}")

    return ReadingDocument(frontmatter=dict(data), body=body.strip())


def read_reading(path: Path, *, encoding: str = "utf-8") -> ReadingDocument:
    """Read and parse a reading file.

    Raises:
        ReadingNotFoundError: if ``path`` does not exist.
        MalformedFrontmatterError: if the file is not valid text in ``encoding``
            or its frontmatter cannot be parsed.

    """
    try:
        content = path.read_text(encoding=encoding)
    except FileNotFoundError as e:
        raise ReadingNotFoundError(path) from e
    except UnicodeDecodeError as e:
        raise MalformedFrontmatterError(path, f"not valid {encoding} text") from e
    return parse_reading(content, source=path)


def order_frontmatter(frontmatter: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``frontmatter`` with keys in canonical order."""
    ordered = {key: frontmatter[key] for key in FIELD_ORDER if key in frontmatter}
    for key in sorted(k for k in frontmatter if k not in ordered):
        ordered[key] = frontmatter[key]
    return ordered


def dump_reading(frontmatter: dict[str, Any], body: str = "") -> str:
    """Serialize frontmatter and body into reading file content."""
    yaml_front = yaml.safe_dump(
        order_frontmatter(frontmatter),
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )
    content = f"{FRONTMATTER_DELIMITER}\n{yaml_front}{FRONTMATTER_DELIMITER}\n"
    body = body.strip()
    if body:
        content += f"\n{body}\n"
    return content


def write_reading(path: Path, frontmatter: dict[str, Any], body: str = "") -> None:
    """Write a reading file, replacing any previous content in one write.

    The write is not atomic: an interruption can leave a truncated file.
    """
    path.write_text(dump_reading(frontmatter, body), encoding="utf-8")
    logger.debug("Wrote reading %s", path.name)


def delete_reading(path: Path) -> None:
    """Delete a reading file.

    Raises:
        ReadingNotFoundError: if ``path`` does not exist.

    """
    try:
        path.unlink()
    except FileNotFoundError as e:
        raise ReadingNotFoundError(path) from e
    logger.info("Deleted reading %s", path.name)


def update_field(frontmatter: dict[str, Any], key: str, value: Any) -> dict[str, Any]:
    """Return a copy of ``frontmatter`` with ``key`` set to ``value``."""
    return {**frontmatter, key: value}


def remove_field(frontmatter: dict[str, Any], key: str) -> dict[str, Any]:
    """Return a copy of ``frontmatter`` without ``key``."""
    return {k: v for k, v in frontmatter.items() if k != key}


def create_reading_frontmatter(
    title: str,
    author: str,
    finished: str | None,
    *,
    cover_image: str | None = None,
    audiobook: bool = False,
    favorite: bool = False,
) -> dict[str, Any]:
    """Build frontmatter for a new reading.

    ``finished`` is always present (``None`` while in progress); optional flags
    and the cover are only written when set.
    """
    frontmatter: dict[str, Any] = {
        "title": title,
        "author": author,
        "finished": finished or None,
    }
    if cover_image:
        frontmatter["coverImage"] = cover_image
    if audiobook:
        frontmatter["audiobook"] = True
    if favorite:
        frontmatter["favorite"] = True
    return frontmatter


__all__ = [
    "FIELD_ORDER",
    "ReadingDocument",
    "create_reading_frontmatter",
    "delete_reading",
    "dump_reading",
    "order_frontmatter",
    "parse_reading",
    "read_reading",
    "remove_field",
    "update_field",
    "write_reading",
]
