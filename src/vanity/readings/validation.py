"""Advisory checks over reread groups.

Findings are returned, never raised: a gap or a missing base file still
resolves to a deterministic group, so callers only report them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from vanity.constants import AdvisoryKind
from vanity.readings.rereads import RereadMap
from vanity.readings.slugs import filename_sequence, format_sequence

logger = logging.getLogger(__name__)

LARGE_GROUP_THRESHOLD = 10


@dataclass(frozen=True, slots=True)
class SequenceAdvisory:
    """A non-fatal finding about one reread group."""

    base_slug: str
    kind: AdvisoryKind
    message: str
    expected: int | None = None
    found: int | None = None

    def __str__(self) -> str:
        return f"{self.base_slug}: {self.message}"


def _check_group(base_slug: str, files: list[str]) -> list[SequenceAdvisory]:
    sequences = sorted(filename_sequence(name, base_slug) for name in files)
    advisories: list[SequenceAdvisory] = []

    if sequences[0] != 1:
        advisories.append(
            SequenceAdvisory(
                base_slug=base_slug,
                kind=AdvisoryKind.MISSING_BASE,
                message=f"Missing base file (starts at -{format_sequence(sequences[0])})",
                expected=1,
                found=sequences[0],
            )
        )

    for previous, current in zip(sequences, sequences[1:]):
        if current == previous:
            advisories.append(
                SequenceAdvisory(
                    base_slug=base_slug,
                    kind=AdvisoryKind.DUPLICATE_SEQUENCE,
                    message=f"More than one file resolves to -{format_sequence(current)}",
                    found=current,
                )
            )
        elif current != previous + 1:
            expected = previous + 1
            advisories.append(
                SequenceAdvisory(
                    base_slug=base_slug,
                    kind=AdvisoryKind.SEQUENCE_GAP,
                    message=(
                        f"Expected -{format_sequence(expected)} but found "
                        f"-{format_sequence(current)} (sequence gap)"
                    ),
                    expected=expected,
                    found=current,
                )
            )

    if len(sequences) > LARGE_GROUP_THRESHOLD:
        advisories.append(
            SequenceAdvisory(
                base_slug=base_slug,
                kind=AdvisoryKind.LARGE_GROUP,
                message=f"{len(sequences)} rereads detected (verify this is correct)",
                found=len(sequences),
            )
        )

    return advisories


def validate_reread_sequences(reread_map: RereadMap) -> list[SequenceAdvisory]:
    """Inspect every multi-file group and return advisories in slug order."""
    advisories: list[SequenceAdvisory] = []
    for base_slug in sorted(reread_map):
        files = reread_map[base_slug]
        if len(files) <= 1:
            continue
        advisories.extend(_check_group(base_slug, files))
    return advisories


def log_advisories(advisories: Iterable[SequenceAdvisory]) -> int:
    """Log each advisory as a warning and return how many there were."""
    count = 0
    for advisory in advisories:
        logger.warning("⚠️  %s", advisory)
        count += 1
    return count


__all__ = [
    "LARGE_GROUP_THRESHOLD",
    "SequenceAdvisory",
    "log_advisories",
    "validate_reread_sequences",
]
