"""Tests for cover image validation and processing."""

from pathlib import Path

import pytest
from PIL import Image

from vanity.exceptions import SecurityRejection
from vanity.readings.covers import (
    COVER_HEIGHT,
    COVER_WIDTH,
    cover_web_path,
    process_cover_image,
    stage_cover_image,
    validate_cover_url,
    validate_image_path,
)
from vanity.readings.exceptions import (
    CoverImageNotFoundError,
    CoverImageProcessingError,
    EncodedPathError,
    ImageTooLargeError,
    InvalidCoverUrlError,
    InvalidSlugError,
    MalformedEncodingError,
    PathTraversalError,
    UnsupportedImageFormatError,
)


class TestValidateImagePath:
    """The validation gate, in order."""

    @pytest.mark.parametrize("path", ["../../etc/passwd", "covers/../secret.jpg", "~/cover.jpg"])
    def test_traversal(self, path):
        with pytest.raises(PathTraversalError, match="Directory traversal"):
            validate_image_path(path)

    @pytest.mark.parametrize("path", ["%2e%2e/%2e%2e/etc/passwd", "covers%2Fcover.jpg", "my%20cover.jpg"])
    def test_encoded(self, path):
        with pytest.raises(EncodedPathError, match="Encoded characters"):
            validate_image_path(path)

    @pytest.mark.parametrize("path", ["cover%zz.jpg", "cover%.jpg", "cover%C0%AF.jpg"])
    def test_malformed_encoding(self, path):
        with pytest.raises(MalformedEncodingError, match="Malformed URL encoding"):
            validate_image_path(path)

    def test_security_errors_share_a_family(self):
        for path in ("../x.jpg", "%2e%2e.jpg", "x%zz.jpg"):
            with pytest.raises(SecurityRejection):
                validate_image_path(path)

    def test_encoded_path_rejected_before_existence_check(self, tmp_path: Path):
        missing = tmp_path / "no%2Dsuch.jpg"
        with pytest.raises(EncodedPathError):
            validate_image_path(str(missing))

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(CoverImageNotFoundError, match="File not found"):
            validate_image_path(str(tmp_path / "missing.jpg"))

    def test_directory_is_not_a_file(self, tmp_path: Path):
        with pytest.raises(CoverImageNotFoundError):
            validate_image_path(str(tmp_path))

    def test_unsupported_format(self, tmp_path: Path):
        path = tmp_path / "cover.bmp"
        path.write_bytes(b"BM")
        with pytest.raises(UnsupportedImageFormatError, match="Invalid image format"):
            validate_image_path(str(path))

    def test_extension_is_case_insensitive(self, make_image):
        path = make_image("COVER.PNG")
        assert validate_image_path(str(path)) == path

    def test_too_large(self, tmp_path: Path):
        path = tmp_path / "huge.jpg"
        with path.open("wb") as fh:
            fh.truncate(11 * 1024 * 1024)

        with pytest.raises(ImageTooLargeError) as excinfo:
            validate_image_path(str(path))

        assert str(excinfo.value) == "File too large (11.0MB). Maximum size: 10MB"


class TestProcessCoverImage:
    def test_resizes_to_cover_frame(self, make_image, tmp_path: Path):
        source = make_image("wide.png", size=(1200, 500))
        images_dir = tmp_path / "public" / "images" / "readings"

        web_path = process_cover_image(str(source), "1984", images_dir)

        assert web_path == "/images/readings/1984.webp"
        with Image.open(images_dir / "1984.webp") as img:
            assert img.format == "WEBP"
            assert img.size == (COVER_WIDTH, COVER_HEIGHT)

    def test_reread_slug_names_the_file(self, make_image, tmp_path: Path):
        source = make_image("cover.jpg")

        web_path = process_cover_image(str(source), "1984-02", tmp_path, web_prefix="/covers/")

        assert web_path == "/covers/1984-02.webp"
        assert (tmp_path / "1984-02.webp").is_file()

    def test_transparent_source(self, make_image, tmp_path: Path):
        source = make_image("alpha.png", mode="RGBA")

        process_cover_image(str(source), "dune", tmp_path)

        assert (tmp_path / "dune.webp").is_file()

    def test_oversize_file_is_never_transcoded(self, tmp_path: Path):
        source = tmp_path / "huge.jpg"
        with source.open("wb") as fh:
            fh.truncate(11 * 1024 * 1024)
        images_dir = tmp_path / "out"

        with pytest.raises(ImageTooLargeError):
            process_cover_image(str(source), "huge", images_dir)

        assert not images_dir.exists()

    def test_corrupt_image(self, tmp_path: Path):
        source = tmp_path / "broken.jpg"
        source.write_bytes(b"definitely not a jpeg")

        with pytest.raises(CoverImageProcessingError):
            process_cover_image(str(source), "broken", tmp_path / "out")

    def test_invalid_slug(self, make_image, tmp_path: Path):
        with pytest.raises(InvalidSlugError):
            process_cover_image(str(make_image()), "Not A Slug", tmp_path)


class TestStageCoverImage:
    def test_existing_cover_untouched_until_commit(self, make_image, tmp_path: Path):
        images_dir = tmp_path / "covers"
        images_dir.mkdir()
        (images_dir / "1984.webp").write_bytes(b"ORIGINAL")

        staged = stage_cover_image(str(make_image()), "1984", images_dir)

        assert staged.web_path == "/images/readings/1984.webp"
        assert (images_dir / "1984.webp").read_bytes() == b"ORIGINAL"

        staged.commit()

        with Image.open(images_dir / "1984.webp") as img:
            assert img.size == (COVER_WIDTH, COVER_HEIGHT)
        assert not staged.staged_path.exists()

    def test_discard_removes_staged_file(self, make_image, tmp_path: Path):
        staged = stage_cover_image(str(make_image()), "dune", tmp_path / "covers")

        staged.discard()
        staged.discard()

        assert list((tmp_path / "covers").iterdir()) == []

    def test_failed_transcode_leaves_nothing(self, tmp_path: Path):
        source = tmp_path / "broken.png"
        source.write_bytes(b"not a png")

        with pytest.raises(CoverImageProcessingError):
            stage_cover_image(str(source), "broken", tmp_path / "covers")

        assert list((tmp_path / "covers").iterdir()) == []


class TestCoverUrl:
    @pytest.mark.parametrize(
        "url",
        ["https://covers.example.org/1984.jpg", "http://example.com/a.png", "  https://example.com/x.webp  "],
    )
    def test_valid(self, url):
        assert validate_cover_url(url) == url.strip()

    @pytest.mark.parametrize("url", ["not a url", "ftp://example.com/a.png", "https://", "/images/a.jpg"])
    def test_invalid(self, url):
        with pytest.raises(InvalidCoverUrlError, match="valid URL"):
            validate_cover_url(url)

    def test_required(self):
        with pytest.raises(InvalidCoverUrlError, match="URL is required"):
            validate_cover_url("  ")


def test_cover_web_path():
    assert cover_web_path("dune") == "/images/readings/dune.webp"
