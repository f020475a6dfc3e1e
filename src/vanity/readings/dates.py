"""Date handling for reading frontmatter.

``finished`` is stored as an ISO 8601 UTC timestamp with millisecond
precision (``2024-01-15T00:00:00.000Z``). YAML may hand it back as a ``date``,
a ``datetime`` or a string depending on how the file was written, so every read
goes through :func:`normalize_finished` before the value is used.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime
from typing import Any

from dateutil import parser as dateutil_parser

from vanity.readings.exceptions import FutureDateError, InvalidDateError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today_iso_date(now: datetime | None = None) -> str:
    """Return today's date (UTC) as ``YYYY-MM-DD``, the default finish date."""
    return (now or datetime.now(UTC)).date().isoformat()


def format_iso_timestamp(value: datetime) -> str:
    """Format an aware or naive datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    dt = value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def validate_date_input(date_input: str | None, *, now: datetime | None = None) -> str:
    """Validate an operator-entered finish date and return it as an ISO timestamp.

    Only the unambiguous ``YYYY-MM-DD`` form is accepted.

    Examples:
        >>> validate_date_input("2024-01-15")
        '2024-01-15T00:00:00.000Z'

    Raises:
        InvalidDateError: if the input is empty or not a real calendar date.
        FutureDateError: if the date is after today (UTC).

    """
    raw = (date_input or "").strip()
    if not raw:
        raise InvalidDateError(raw, "Date is required")
    if not _ISO_DATE.match(raw):
        raise InvalidDateError(raw, "Please enter a valid date (YYYY-MM-DD)")

    try:
        parsed = dateutil_parser.isoparse(raw).replace(tzinfo=UTC)
    except (ValueError, OverflowError) as e:
        raise InvalidDateError(raw, "Please enter a valid date (YYYY-MM-DD)") from e

    current = now or datetime.now(UTC)
    if parsed.date() > current.astimezone(UTC).date():
        raise FutureDateError(raw)

    return format_iso_timestamp(parsed)


def check_date_input(date_input: str) -> str | None:
    """Return an error message for ``date_input``, or None when it is acceptable.

    Empty input is acceptable here; callers decide whether a date is required.
    """
    if not date_input or not date_input.strip():
        return None
    try:
        validate_date_input(date_input)
    except InvalidDateError as e:
        return str(e)
    return None


def normalize_finished(value: Any) -> datetime | None:
    """Resolve a raw ``finished`` frontmatter value to an aware UTC datetime.

    ``None`` and empty strings mean the book is still being read.

    Raises:
        InvalidDateError: if the value is present but cannot be parsed.

    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)

    raw = str(value).strip()
    if not raw:
        return None
    try:
        parsed = dateutil_parser.isoparse(raw)
    except (ValueError, OverflowError) as e:
        raise InvalidDateError(raw, f"Unrecognized finished date '{raw}'") from e
    return parsed.replace(tzinfo=UTC) if parsed.tzinfo is None else parsed.astimezone(UTC)


def finished_to_iso(value: Any) -> str | None:
    """Normalize a raw ``finished`` value straight to its stored string form."""
    normalized = normalize_finished(value)
    return format_iso_timestamp(normalized) if normalized else None


__all__ = [
    "check_date_input",
    "finished_to_iso",
    "format_iso_timestamp",
    "normalize_finished",
    "today_iso_date",
    "validate_date_input",
]
