"""Tests for the update wizard."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from tests.utils.prompters import ScriptedUpdatePrompter
from vanity.constants import CoverUpdateChoice, FlowOutcome, UpdateAction
from vanity.exceptions import SecurityRejection, ValidationError
from vanity.readings.exceptions import FutureDateError
from vanity.readings.frontmatter import read_reading
from vanity.readings.update import RECENT_FINISHED_LIMIT, CoverUpdate, UpdateReadingFlow

NOW = datetime(2024, 6, 1, 15, 30, tzinfo=UTC)


def _flow(prompter, readings_dir: Path, images_dir: Path) -> UpdateReadingFlow:
    return UpdateReadingFlow(
        prompter=prompter,
        readings_dir=readings_dir,
        images_dir=images_dir,
        clock=lambda: NOW,
    )


@pytest.fixture
def dune(write_reading_file) -> Path:
    return write_reading_file(
        "dune.md",
        body="Fear is the mind-killer.",
        title="Dune",
        author="Frank Herbert",
        finished=None,
        favorite=True,
    )


def test_empty_directory(readings_dir: Path, images_dir: Path):
    prompter = ScriptedUpdatePrompter()

    result = _flow(prompter, readings_dir, images_dir).run()

    assert result.outcome is FlowOutcome.UNCHANGED
    assert prompter.offered is None


def test_selection_lists_unfinished_then_recent_finished(
    write_reading_file, readings_dir: Path, images_dir: Path
):
    write_reading_file("in-progress.md", finished=None)
    for day in range(1, RECENT_FINISHED_LIMIT + 3):
        write_reading_file(f"book-{day:02d}x.md", finished=f"2024-01-{day:02d}T00:00:00.000Z")
    prompter = ScriptedUpdatePrompter(filename=None)

    result = _flow(prompter, readings_dir, images_dir).run()

    assert result.outcome is FlowOutcome.CANCELLED
    assert prompter.offered is not None
    unfinished, finished = prompter.offered
    assert [e.filename for e in unfinished] == ["in-progress.md"]
    assert len(finished) == RECENT_FINISHED_LIMIT
    assert finished[0].filename == f"book-{RECENT_FINISHED_LIMIT + 2:02d}x.md"


def test_finish_today_keeps_body(dune: Path, readings_dir: Path, images_dir: Path):
    prompter = ScriptedUpdatePrompter(filename="dune.md", action=UpdateAction.FINISH_TODAY)

    result = _flow(prompter, readings_dir, images_dir).run()

    assert result.outcome is FlowOutcome.UPDATED
    document = read_reading(dune)
    assert document.frontmatter["finished"] == "2024-06-01T15:30:00.000Z"
    assert document.body == "Fear is the mind-killer."
    assert [c.label for c in prompter.changes] == ["Finished"]


def test_finish_custom_date(dune: Path, readings_dir: Path, images_dir: Path):
    prompter = ScriptedUpdatePrompter(
        filename="dune.md", action=UpdateAction.FINISH_CUSTOM, finish_date="2024-05-20"
    )

    _flow(prompter, readings_dir, images_dir).run()

    assert read_reading(dune).frontmatter["finished"] == "2024-05-20T00:00:00.000Z"


def test_finish_custom_rejects_future(dune: Path, readings_dir: Path, images_dir: Path):
    before = dune.read_text(encoding="utf-8")
    prompter = ScriptedUpdatePrompter(
        filename="dune.md", action=UpdateAction.FINISH_CUSTOM, finish_date="2024-06-02"
    )

    with pytest.raises(FutureDateError):
        _flow(prompter, readings_dir, images_dir).run()

    assert dune.read_text(encoding="utf-8") == before


def test_edit_title_offers_current_value(dune: Path, readings_dir: Path, images_dir: Path):
    prompter = ScriptedUpdatePrompter(filename="dune.md", action=UpdateAction.TITLE, text="  Dune Messiah ")

    _flow(prompter, readings_dir, images_dir).run()

    assert prompter.text_defaults == [("Title", "Dune")]
    assert read_reading(dune).frontmatter["title"] == "Dune Messiah"


def test_blank_author_rejected(dune: Path, readings_dir: Path, images_dir: Path):
    prompter = ScriptedUpdatePrompter(filename="dune.md", action=UpdateAction.AUTHOR, text=" ")

    with pytest.raises(ValidationError, match="Author is required"):
        _flow(prompter, readings_dir, images_dir).run()


def test_toggles(dune: Path, readings_dir: Path, images_dir: Path):
    for action in (UpdateAction.FAVORITE, UpdateAction.AUDIOBOOK):
        _flow(ScriptedUpdatePrompter(filename="dune.md", action=action), readings_dir, images_dir).run()

    frontmatter = read_reading(dune).frontmatter
    assert "favorite" not in frontmatter
    assert frontmatter["audiobook"] is True


def test_declined_changes_are_discarded(dune: Path, readings_dir: Path, images_dir: Path):
    before = dune.read_text(encoding="utf-8")
    prompter = ScriptedUpdatePrompter(filename="dune.md", action=UpdateAction.FAVORITE, save=False)

    result = _flow(prompter, readings_dir, images_dir).run()

    assert result.outcome is FlowOutcome.CANCELLED
    assert dune.read_text(encoding="utf-8") == before


def test_unchanged_value_is_not_written(dune: Path, readings_dir: Path, images_dir: Path):
    prompter = ScriptedUpdatePrompter(filename="dune.md", action=UpdateAction.TITLE, text="Dune")

    result = _flow(prompter, readings_dir, images_dir).run()

    assert result.outcome is FlowOutcome.UNCHANGED


class TestCoverActions:
    def test_url(self, dune: Path, readings_dir: Path, images_dir: Path):
        prompter = ScriptedUpdatePrompter(
            filename="dune.md",
            action=UpdateAction.COVER,
            cover=CoverUpdate(CoverUpdateChoice.URL, "https://example.com/dune.jpg"),
        )

        _flow(prompter, readings_dir, images_dir).run()

        assert read_reading(dune).frontmatter["coverImage"] == "https://example.com/dune.jpg"

    def test_local(self, dune: Path, make_image, readings_dir: Path, images_dir: Path):
        prompter = ScriptedUpdatePrompter(
            filename="dune.md",
            action=UpdateAction.COVER,
            cover=CoverUpdate(CoverUpdateChoice.LOCAL, str(make_image("dune.jpg"))),
        )

        _flow(prompter, readings_dir, images_dir).run()

        assert read_reading(dune).frontmatter["coverImage"] == "/images/readings/dune.webp"
        assert (images_dir / "dune.webp").is_file()

    def test_local_rejected(self, dune: Path, readings_dir: Path, images_dir: Path):
        prompter = ScriptedUpdatePrompter(
            filename="dune.md",
            action=UpdateAction.COVER,
            cover=CoverUpdate(CoverUpdateChoice.LOCAL, "%2e%2e/cover.jpg"),
        )

        with pytest.raises(SecurityRejection):
            _flow(prompter, readings_dir, images_dir).run()

    def test_declined_changes_keep_existing_cover(
        self, write_reading_file, make_image, readings_dir: Path, images_dir: Path
    ):
        write_reading_file("emma.md", title="Emma", coverImage="https://example.com/emma.jpg")
        images_dir.mkdir(parents=True)
        (images_dir / "emma.webp").write_bytes(b"ORIGINAL")
        prompter = ScriptedUpdatePrompter(
            filename="emma.md",
            action=UpdateAction.COVER,
            cover=CoverUpdate(CoverUpdateChoice.LOCAL, str(make_image())),
            save=False,
        )

        result = _flow(prompter, readings_dir, images_dir).run()

        assert result.outcome is FlowOutcome.CANCELLED
        assert (images_dir / "emma.webp").read_bytes() == b"ORIGINAL"
        assert sorted(p.name for p in images_dir.iterdir()) == ["emma.webp"]

    def test_same_path_new_image_is_confirmed(
        self, write_reading_file, make_image, readings_dir: Path, images_dir: Path
    ):
        write_reading_file("emma.md", title="Emma", coverImage="/images/readings/emma.webp")
        images_dir.mkdir(parents=True)
        (images_dir / "emma.webp").write_bytes(b"ORIGINAL")
        prompter = ScriptedUpdatePrompter(
            filename="emma.md",
            action=UpdateAction.COVER,
            cover=CoverUpdate(CoverUpdateChoice.LOCAL, str(make_image())),
        )

        result = _flow(prompter, readings_dir, images_dir).run()

        assert result.outcome is FlowOutcome.UPDATED
        assert [c.label for c in prompter.changes] == ["Cover"]
        assert (images_dir / "emma.webp").read_bytes().startswith(b"RIFF")

    def test_remove(self, write_reading_file, readings_dir: Path, images_dir: Path):
        path = write_reading_file("emma.md", title="Emma", coverImage="/images/readings/emma.webp")
        prompter = ScriptedUpdatePrompter(
            filename="emma.md",
            action=UpdateAction.COVER,
            cover=CoverUpdate(CoverUpdateChoice.REMOVE),
        )

        _flow(prompter, readings_dir, images_dir).run()

        assert "coverImage" not in read_reading(path).frontmatter


class TestDelete:
    def test_confirmed(self, dune: Path, readings_dir: Path, images_dir: Path):
        prompter = ScriptedUpdatePrompter(filename="dune.md", action=UpdateAction.DELETE, delete=True)

        result = _flow(prompter, readings_dir, images_dir).run()

        assert result.outcome is FlowOutcome.DELETED
        assert not dune.exists()

    def test_declined(self, dune: Path, readings_dir: Path, images_dir: Path):
        prompter = ScriptedUpdatePrompter(filename="dune.md", action=UpdateAction.DELETE, delete=False)

        result = _flow(prompter, readings_dir, images_dir).run()

        assert result.outcome is FlowOutcome.CANCELLED
        assert dune.exists()


def test_cancel_action(dune: Path, readings_dir: Path, images_dir: Path):
    result = _flow(ScriptedUpdatePrompter(filename="dune.md"), readings_dir, images_dir).run()

    assert result.outcome is FlowOutcome.CANCELLED
