"""The add-reading conversation.

One :class:`AddReadingFlow` drives one "add a reading" invocation:

    collecting_basics -> checking_existing -> (creating | deciding)
        -> collecting_metadata -> collecting_image -> previewing -> persisted

When the work has been read before the operator decides between recording a
reread (next numbered file), updating the most recent entry in place, or
cancelling. Nothing is written until the previewing step is confirmed, so any
failure or cancellation before that leaves the readings directory untouched.
A local cover is staged under a hidden name and replaces the reading's cover
only after the record is written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, assert_never

from vanity.constants import CoverChoice, FlowOutcome, FlowState, RereadAction
from vanity.exceptions import ValidationError, VanityError
from vanity.readings.covers import DEFAULT_WEB_PREFIX, StagedCover, stage_cover_image, validate_cover_url
from vanity.readings.dates import validate_date_input
from vanity.readings.exceptions import InvalidDateError, ReadingExistsError
from vanity.readings.frontmatter import (
    FIELD_ORDER,
    ReadingDocument,
    create_reading_frontmatter,
    read_reading,
    write_reading,
)
from vanity.readings.preview import ReadingPreview
from vanity.readings.rereads import MostRecentReading, find_existing_readings, get_most_recent_reading
from vanity.readings.slugs import allocate_next_filename, reading_filename, reading_stem, slugify

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BasicInfo:
    title: str
    author: str


@dataclass(frozen=True, slots=True)
class ReadingMetadata:
    """Answers from the metadata step; ``finished_date`` is raw ``YYYY-MM-DD``."""

    finished: bool
    finished_date: str | None = None
    audiobook: bool = False
    favorite: bool = False


@dataclass(frozen=True, slots=True)
class CoverSelection:
    choice: CoverChoice
    value: str | None = None


@dataclass(slots=True)
class ReadingTarget:
    """The file a flow will write, and whether it replaces an existing reading."""

    filename: str
    path: Path
    action: RereadAction | None = None
    existing: ReadingDocument | None = None

    @property
    def stem(self) -> str:
        return reading_stem(self.filename)

    @property
    def is_update(self) -> bool:
        return self.action is RereadAction.UPDATE


@dataclass(frozen=True, slots=True)
class FlowResult:
    outcome: FlowOutcome
    filename: str | None = None
    path: Path | None = None
    frontmatter: dict[str, Any] | None = None


class ReadingPrompter(Protocol):
    """Operator interaction needed by :class:`AddReadingFlow`."""

    def ask_basics(self) -> BasicInfo: ...

    def ask_reread_action(
        self, title: str, existing: MostRecentReading, next_filename: str
    ) -> RereadAction: ...

    def ask_metadata(self) -> ReadingMetadata: ...

    def ask_cover_image(self) -> CoverSelection: ...

    def ask_continue_without_image(self, error: Exception) -> bool: ...

    def confirm_save(self, preview: ReadingPreview) -> bool: ...


class _FlowCancelled(Exception):
    """Unwinds the flow when the operator backs out."""


@dataclass
class AddReadingFlow:
    """State machine for adding one reading."""

    prompter: ReadingPrompter
    readings_dir: Path
    images_dir: Path
    image_web_prefix: str = DEFAULT_WEB_PREFIX
    state: FlowState = FlowState.COLLECTING_BASICS
    history: list[FlowState] = field(default_factory=lambda: [FlowState.COLLECTING_BASICS])
    staged_cover: StagedCover | None = field(default=None, init=False, repr=False)

    def _enter(self, state: FlowState) -> None:
        logger.debug("add-reading: %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def run(self) -> FlowResult:
        """Drive the conversation to completion.

        Raises:
            VanityError: on any validation or I/O failure; nothing is written.

        """
        try:
            return self._run()
        finally:
            # Only a saved reading keeps its new cover.
            if self.staged_cover is not None:
                self.staged_cover.discard()
                self.staged_cover = None

    def _run(self) -> FlowResult:
        try:
            basics = self._collect_basics()
            slug = slugify(basics.title)

            self._enter(FlowState.CHECKING_EXISTING)
            target = self._resolve_target(slug, basics.title)

            self._enter(FlowState.COLLECTING_METADATA)
            metadata = self.prompter.ask_metadata()
            finished = self._resolve_finished(metadata)

            self._enter(FlowState.COLLECTING_IMAGE)
            cover_image = self._collect_image(target)

            frontmatter = self._build_frontmatter(basics, metadata, finished, cover_image, target)

            self._enter(FlowState.PREVIEWING)
            preview = ReadingPreview(
                title=basics.title,
                author=basics.author,
                finished=finished is not None,
                filename=target.filename,
                action="Update" if target.is_update else "Create",
                cover_image=frontmatter.get("coverImage"),
                audiobook=metadata.audiobook,
                favorite=metadata.favorite,
            )
            if not self.prompter.confirm_save(preview):
                raise _FlowCancelled
        except _FlowCancelled:
            self._enter(FlowState.CANCELLED)
            logger.info("Reading creation cancelled")
            return FlowResult(outcome=FlowOutcome.CANCELLED)

        self._persist(target, frontmatter)
        if self.staged_cover is not None:
            self.staged_cover.commit()
        self._enter(FlowState.PERSISTED)
        return FlowResult(
            outcome=FlowOutcome.UPDATED if target.is_update else FlowOutcome.CREATED,
            filename=target.filename,
            path=target.path,
            frontmatter=frontmatter,
        )

    def _collect_basics(self) -> BasicInfo:
        basics = self.prompter.ask_basics()
        title, author = basics.title.strip(), basics.author.strip()
        if not author:
            msg = "Author is required"
            raise ValidationError(msg)
        return BasicInfo(title=title, author=author)

    def _resolve_target(self, slug: str, title: str) -> ReadingTarget:
        existing_files = find_existing_readings(slug, self.readings_dir)
        if not existing_files:
            self._enter(FlowState.CREATING)
            filename = reading_filename(slug)
            return ReadingTarget(filename=filename, path=self.readings_dir / filename)

        self._enter(FlowState.DECIDING)
        most_recent = get_most_recent_reading(slug, self.readings_dir)
        next_filename = allocate_next_filename(slug, existing_files)
        if most_recent is None:
            # The group vanished between the two scans; treat it as brand new.
            filename = reading_filename(slug)
            return ReadingTarget(filename=filename, path=self.readings_dir / filename)

        action = self.prompter.ask_reread_action(title, most_recent, next_filename)
        match action:
            case RereadAction.REREAD:
                logger.info("Recording reread as %s", next_filename)
                return ReadingTarget(
                    filename=next_filename,
                    path=self.readings_dir / next_filename,
                    action=RereadAction.REREAD,
                )
            case RereadAction.UPDATE:
                latest = existing_files[-1]
                path = self.readings_dir / latest
                logger.info("Updating most recent entry %s", latest)
                return ReadingTarget(
                    filename=latest,
                    path=path,
                    action=RereadAction.UPDATE,
                    existing=read_reading(path),
                )
            case RereadAction.CANCEL:
                raise _FlowCancelled
            case _:
                assert_never(action)

    def _resolve_finished(self, metadata: ReadingMetadata) -> str | None:
        if not metadata.finished:
            return None
        if not metadata.finished_date:
            raise InvalidDateError("", "Date is required")
        return validate_date_input(metadata.finished_date)

    def _collect_image(self, target: ReadingTarget) -> str | None:
        selection = self.prompter.ask_cover_image()
        match selection.choice:
            case CoverChoice.SKIP:
                return None
            case CoverChoice.URL:
                return validate_cover_url(selection.value or "")
            case CoverChoice.LOCAL:
                if not selection.value or not selection.value.strip():
                    msg = "Path is required"
                    raise ValidationError(msg)
                return self._process_local_image(selection.value.strip(), target)
            case _:
                assert_never(selection.choice)

    def _process_local_image(self, image_path: str, target: ReadingTarget) -> str | None:
        try:
            self.staged_cover = stage_cover_image(
                image_path,
                target.stem,
                self.images_dir,
                web_prefix=self.image_web_prefix,
            )
        except VanityError as exc:
            logger.warning("Failed to process image: %s", exc)
            if not self.prompter.ask_continue_without_image(exc):
                raise _FlowCancelled from exc
            logger.info("Continuing without cover image")
            return None
        return self.staged_cover.web_path

    def _build_frontmatter(
        self,
        basics: BasicInfo,
        metadata: ReadingMetadata,
        finished: str | None,
        cover_image: str | None,
        target: ReadingTarget,
    ) -> dict[str, Any]:
        extra: dict[str, Any] = {}
        if target.existing is not None:
            previous = target.existing.frontmatter
            extra = {k: v for k, v in previous.items() if k not in FIELD_ORDER}
            # Skipping the image step keeps the cover the entry already had.
            cover_image = cover_image or previous.get("coverImage")

        frontmatter = create_reading_frontmatter(
            basics.title,
            basics.author,
            finished,
            cover_image=cover_image,
            audiobook=metadata.audiobook,
            favorite=metadata.favorite,
        )
        return {**frontmatter, **extra}

    def _persist(self, target: ReadingTarget, frontmatter: dict[str, Any]) -> None:
        self.readings_dir.mkdir(parents=True, exist_ok=True)
        if target.is_update:
            body = target.existing.body if target.existing else ""
            write_reading(target.path, frontmatter, body)
            logger.info("Updated %s", target.filename)
            return

        if target.path.exists():
            raise ReadingExistsError(target.path)
        write_reading(target.path, frontmatter)
        logger.info("Saved %s", target.filename)


__all__ = [
    "AddReadingFlow",
    "BasicInfo",
    "CoverSelection",
    "FlowResult",
    "ReadingMetadata",
    "ReadingPrompter",
    "ReadingTarget",
]
