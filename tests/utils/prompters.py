"""Scripted stand-ins for the terminal prompters."""

from __future__ import annotations

from dataclasses import dataclass, field

from vanity.constants import CoverChoice, CoverUpdateChoice, RereadAction, UpdateAction
from vanity.readings.catalog import ReadingEntry
from vanity.readings.flow import BasicInfo, CoverSelection, ReadingMetadata
from vanity.readings.preview import FieldChange, ReadingPreview
from vanity.readings.rereads import MostRecentReading
from vanity.readings.update import CoverUpdate


@dataclass
class ScriptedPrompter:
    """Answers the add-reading questions from fixed values and records what it was shown."""

    title: str = "1984"
    author: str = "George Orwell"
    reread_action: RereadAction = RereadAction.REREAD
    metadata: ReadingMetadata = field(default_factory=lambda: ReadingMetadata(finished=False))
    cover: CoverSelection = field(default_factory=lambda: CoverSelection(CoverChoice.SKIP))
    continue_without_image: bool = True
    save: bool = True

    reread_prompts: list[tuple[str, MostRecentReading, str]] = field(default_factory=list)
    image_errors: list[Exception] = field(default_factory=list)
    previews: list[ReadingPreview] = field(default_factory=list)

    def ask_basics(self) -> BasicInfo:
        return BasicInfo(title=self.title, author=self.author)

    def ask_reread_action(self, title: str, existing: MostRecentReading, next_filename: str) -> RereadAction:
        self.reread_prompts.append((title, existing, next_filename))
        return self.reread_action

    def ask_metadata(self) -> ReadingMetadata:
        return self.metadata

    def ask_cover_image(self) -> CoverSelection:
        return self.cover

    def ask_continue_without_image(self, error: Exception) -> bool:
        self.image_errors.append(error)
        return self.continue_without_image

    def confirm_save(self, preview: ReadingPreview) -> bool:
        self.previews.append(preview)
        return self.save


@dataclass
class ScriptedUpdatePrompter:
    """Answers the update-wizard questions from fixed values."""

    filename: str | None = None
    action: UpdateAction = UpdateAction.CANCEL
    text: str = ""
    finish_date: str = ""
    cover: CoverUpdate = field(default_factory=lambda: CoverUpdate(CoverUpdateChoice.CANCEL))
    delete: bool = False
    save: bool = True

    offered: tuple[list[ReadingEntry], list[ReadingEntry]] | None = None
    text_defaults: list[tuple[str, str]] = field(default_factory=list)
    changes: list[FieldChange] = field(default_factory=list)

    def select_reading(self, unfinished: list[ReadingEntry], finished: list[ReadingEntry]) -> str | None:
        self.offered = (unfinished, finished)
        return self.filename

    def ask_update_action(self, entry: ReadingEntry) -> UpdateAction:
        return self.action

    def ask_text(self, label: str, default: str) -> str:
        self.text_defaults.append((label, default))
        return self.text

    def ask_finish_date(self) -> str:
        return self.finish_date

    def ask_cover_update(self, current: str | None) -> CoverUpdate:
        return self.cover

    def confirm_delete(self, entry: ReadingEntry) -> bool:
        return self.delete

    def confirm_changes(self, changes: list[FieldChange]) -> bool:
        self.changes = list(changes)
        return self.save
