"""The update wizard for an existing reading.

Pick a reading, apply one edit (or delete it), review the field-by-field
diff, then save. The markdown body is carried over untouched, and a new local
cover replaces the old one only when the changes are saved.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol, assert_never

from vanity.constants import CoverUpdateChoice, FlowOutcome, UpdateAction
from vanity.exceptions import ValidationError
from vanity.readings.catalog import ReadingEntry, load_catalog, sort_by_finished
from vanity.readings.covers import DEFAULT_WEB_PREFIX, StagedCover, stage_cover_image, validate_cover_url
from vanity.readings.dates import format_iso_timestamp, validate_date_input
from vanity.readings.flow import FlowResult
from vanity.readings.frontmatter import (
    delete_reading,
    read_reading,
    remove_field,
    update_field,
    write_reading,
)
from vanity.readings.preview import FieldChange, diff_frontmatter
from vanity.readings.slugs import reading_stem

logger = logging.getLogger(__name__)

RECENT_FINISHED_LIMIT = 10


@dataclass(frozen=True, slots=True)
class CoverUpdate:
    choice: CoverUpdateChoice
    value: str | None = None


class UpdatePrompter(Protocol):
    """Operator interaction needed by :class:`UpdateReadingFlow`."""

    def select_reading(
        self, unfinished: list[ReadingEntry], finished: list[ReadingEntry]
    ) -> str | None: ...

    def ask_update_action(self, entry: ReadingEntry) -> UpdateAction: ...

    def ask_text(self, label: str, default: str) -> str: ...

    def ask_finish_date(self) -> str: ...

    def ask_cover_update(self, current: str | None) -> CoverUpdate: ...

    def confirm_delete(self, entry: ReadingEntry) -> bool: ...

    def confirm_changes(self, changes: list[FieldChange]) -> bool: ...


def _toggle(frontmatter: dict[str, Any], key: str) -> dict[str, Any]:
    if frontmatter.get(key):
        return remove_field(frontmatter, key)
    return update_field(frontmatter, key, True)


@dataclass
class UpdateReadingFlow:
    """Edit or delete one existing reading."""

    prompter: UpdatePrompter
    readings_dir: Path
    images_dir: Path
    image_web_prefix: str = DEFAULT_WEB_PREFIX
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(UTC))
    staged_cover: StagedCover | None = field(default=None, init=False, repr=False)

    def run(self) -> FlowResult:
        try:
            return self._run()
        finally:
            if self.staged_cover is not None:
                self.staged_cover.discard()
                self.staged_cover = None

    def _run(self) -> FlowResult:
        catalog = load_catalog(self.readings_dir)
        ordered = sort_by_finished(catalog.entries)
        unfinished = [e for e in ordered if not e.record.is_finished]
        finished = [e for e in ordered if e.record.is_finished][:RECENT_FINISHED_LIMIT]
        if not unfinished and not finished:
            logger.info("No readings found to update")
            return FlowResult(outcome=FlowOutcome.UNCHANGED)

        filename = self.prompter.select_reading(unfinished, finished)
        if filename is None:
            return FlowResult(outcome=FlowOutcome.CANCELLED)

        entry = next(e for e in catalog.entries if e.filename == filename)
        path = self.readings_dir / filename
        document = read_reading(path)

        action = self.prompter.ask_update_action(entry)
        if action is UpdateAction.CANCEL:
            return FlowResult(outcome=FlowOutcome.CANCELLED, filename=filename, path=path)
        if action is UpdateAction.DELETE:
            return self._delete(entry, path)

        updated = self._apply(action, document.frontmatter, entry)
        changes = diff_frontmatter(document.frontmatter, updated)
        if not changes and self.staged_cover is not None:
            # Same path, new image.
            web_path = self.staged_cover.web_path
            changes = [FieldChange("Cover", web_path, f"{web_path} (new image)")]
        if not changes:
            return FlowResult(outcome=FlowOutcome.UNCHANGED, filename=filename, path=path)
        if not self.prompter.confirm_changes(changes):
            logger.info("Changes discarded")
            return FlowResult(outcome=FlowOutcome.CANCELLED, filename=filename, path=path)

        write_reading(path, updated, document.body)
        if self.staged_cover is not None:
            self.staged_cover.commit()
        logger.info("Updated %s (%d field(s))", filename, len(changes))
        return FlowResult(outcome=FlowOutcome.UPDATED, filename=filename, path=path, frontmatter=updated)

    def _delete(self, entry: ReadingEntry, path: Path) -> FlowResult:
        if not self.prompter.confirm_delete(entry):
            logger.info("Deletion cancelled")
            return FlowResult(outcome=FlowOutcome.CANCELLED, filename=entry.filename, path=path)
        delete_reading(path)
        return FlowResult(outcome=FlowOutcome.DELETED, filename=entry.filename, path=path)

    def _ask_required_text(self, label: str, default: str) -> str:
        value = self.prompter.ask_text(label, default).strip()
        if not value:
            msg = f"{label} is required"
            raise ValidationError(msg)
        return value

    def _apply(
        self, action: UpdateAction, frontmatter: dict[str, Any], entry: ReadingEntry
    ) -> dict[str, Any]:
        match action:
            case UpdateAction.FINISH_TODAY:
                return update_field(frontmatter, "finished", format_iso_timestamp(self.clock()))
            case UpdateAction.FINISH_CUSTOM:
                finished = validate_date_input(self.prompter.ask_finish_date(), now=self.clock())
                return update_field(frontmatter, "finished", finished)
            case UpdateAction.TITLE:
                return update_field(
                    frontmatter, "title", self._ask_required_text("Title", entry.record.title)
                )
            case UpdateAction.AUTHOR:
                return update_field(
                    frontmatter, "author", self._ask_required_text("Author", entry.record.author)
                )
            case UpdateAction.COVER:
                return self._apply_cover(frontmatter, entry)
            case UpdateAction.AUDIOBOOK:
                return _toggle(frontmatter, "audiobook")
            case UpdateAction.FAVORITE:
                return _toggle(frontmatter, "favorite")
            case UpdateAction.DELETE | UpdateAction.CANCEL:
                return frontmatter
            case _:
                assert_never(action)

    def _apply_cover(self, frontmatter: dict[str, Any], entry: ReadingEntry) -> dict[str, Any]:
        update = self.prompter.ask_cover_update(entry.record.cover_image)
        match update.choice:
            case CoverUpdateChoice.CANCEL:
                return frontmatter
            case CoverUpdateChoice.REMOVE:
                return remove_field(frontmatter, "coverImage")
            case CoverUpdateChoice.URL:
                return update_field(frontmatter, "coverImage", validate_cover_url(update.value or ""))
            case CoverUpdateChoice.LOCAL:
                self.staged_cover = stage_cover_image(
                    (update.value or "").strip(),
                    reading_stem(entry.filename),
                    self.images_dir,
                    web_prefix=self.image_web_prefix,
                )
                return update_field(frontmatter, "coverImage", self.staged_cover.web_path)
            case _:
                assert_never(update.choice)


__all__ = ["CoverUpdate", "RECENT_FINISHED_LIMIT", "UpdatePrompter", "UpdateReadingFlow"]
