"""Cover image validation and storage.

Local cover images are checked for path safety, format and size, then cropped
to a 2:3 book-cover frame, re-encoded as WebP and stored as
``<images_dir>/<slug>.webp``. The interactive flows stage the WebP under a
hidden name and move it into place only once the reading is saved. Records
reference the site-relative path, never the filesystem path. Pixel work
is Pillow's; this module owns the validation gate and the naming.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlparse

from PIL import Image, ImageOps, UnidentifiedImageError

from vanity.readings.exceptions import (
    CoverImageNotFoundError,
    CoverImageProcessingError,
    EncodedPathError,
    ImageTooLargeError,
    InvalidCoverUrlError,
    MalformedEncodingError,
    PathTraversalError,
    UnsupportedImageFormatError,
)
from vanity.readings.slugs import ensure_slug

logger = logging.getLogger(__name__)

COVER_WIDTH = 400
COVER_HEIGHT = 600
COVER_QUALITY = 80
COVER_FORMAT = "WEBP"
COVER_EXTENSION = ".webp"
ALLOWED_EXTENSIONS: tuple[str, ...] = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif")
MAX_FILE_SIZE_MB = 10
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
DEFAULT_WEB_PREFIX = "/images/readings"
STAGED_SUFFIX = ".partial"

_TRAVERSAL_MARKERS = ("..", "~")
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _decode_path(image_path: str) -> str:
    """Percent-decode ``image_path`` strictly.

    Raises:
        MalformedEncodingError: on a stray ``%`` or escapes that are not UTF-8.

    """
    if _BAD_PERCENT_ESCAPE.search(image_path):
        raise MalformedEncodingError
    try:
        return unquote(image_path, errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedEncodingError from e


def validate_image_path(image_path: str) -> Path:
    """Run the validation gate for a local cover image and return its path.

    Checks run in a fixed order and stop at the first failure. Traversal and
    encoding checks come before any filesystem access.

    Raises:
        PathTraversalError: if the raw path contains ``..`` or ``~``.
        MalformedEncodingError: if percent-escapes cannot be decoded.
        EncodedPathError: if decoding changes the path.
        CoverImageNotFoundError: if the file does not exist.
        UnsupportedImageFormatError: if the extension is not allowed.
        ImageTooLargeError: if the file exceeds the size limit.

    """
    if any(marker in image_path for marker in _TRAVERSAL_MARKERS):
        raise PathTraversalError

    decoded = _decode_path(image_path)
    if ".." in decoded or decoded != image_path:
        raise EncodedPathError

    path = Path(image_path)
    if not path.is_file():
        raise CoverImageNotFoundError

    extension = path.suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise UnsupportedImageFormatError(extension, ALLOWED_EXTENSIONS)

    size = path.stat().st_size
    if size > MAX_FILE_SIZE_BYTES:
        raise ImageTooLargeError(size / (1024 * 1024), MAX_FILE_SIZE_MB)

    return path


def validate_cover_url(url: str) -> str:
    """Return ``url`` stripped if it is an absolute http(s) URL with a host."""
    candidate = (url or "").strip()
    parsed = urlparse(candidate)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidCoverUrlError(url or "")
    return candidate


def cover_web_path(slug: str, web_prefix: str = DEFAULT_WEB_PREFIX) -> str:
    """Return the site-relative path records use for ``slug``'s cover."""
    return f"{web_prefix.rstrip('/')}/{slug}{COVER_EXTENSION}"


def _transcode(source: Path, destination: Path) -> None:
    try:
        with Image.open(source) as img:
            oriented = ImageOps.exif_transpose(img)
            if oriented.mode not in ("RGB", "RGBA"):
                oriented = oriented.convert("RGBA" if "A" in oriented.getbands() else "RGB")
            fitted = ImageOps.fit(
                oriented,
                (COVER_WIDTH, COVER_HEIGHT),
                method=Image.Resampling.LANCZOS,
                centering=(0.5, 0.5),
            )
            fitted.save(destination, format=COVER_FORMAT, quality=COVER_QUALITY)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise CoverImageProcessingError(source, str(e)) from e


@dataclass(frozen=True, slots=True)
class StagedCover:
    """A processed cover waiting beside its final name until the record is saved."""

    staged_path: Path
    destination: Path
    web_path: str

    def commit(self) -> None:
        """Move the staged cover over its final name, replacing any previous cover."""
        self.staged_path.replace(self.destination)
        logger.info("Saved cover image %s", self.destination.name)

    def discard(self) -> None:
        """Remove the staged cover; a no-op once committed."""
        self.staged_path.unlink(missing_ok=True)


def stage_cover_image(
    image_path: str,
    slug: str,
    images_dir: Path,
    *,
    web_prefix: str = DEFAULT_WEB_PREFIX,
) -> StagedCover:
    """Validate and resize a local cover without touching ``slug``'s current cover.

    The WebP is written to a hidden file in ``images_dir``; call
    :meth:`StagedCover.commit` once the reading is saved, or
    :meth:`StagedCover.discard` if it is not.

    Raises:
        InvalidSlugError: if ``slug`` is not a well-formed slug.
        CoverImageProcessingError: if Pillow cannot decode or encode the image.

    """
    ensure_slug(slug)
    source = validate_image_path(image_path)

    images_dir.mkdir(parents=True, exist_ok=True)
    destination = images_dir / f"{slug}{COVER_EXTENSION}"
    staged_path = images_dir / f".{slug}{COVER_EXTENSION}{STAGED_SUFFIX}"

    logger.debug("Transcoding %s -> %s", source, staged_path)
    try:
        _transcode(source, staged_path)
    except CoverImageProcessingError:
        staged_path.unlink(missing_ok=True)
        raise

    return StagedCover(
        staged_path=staged_path,
        destination=destination,
        web_path=cover_web_path(slug, web_prefix),
    )


def process_cover_image(
    image_path: str,
    slug: str,
    images_dir: Path,
    *,
    web_prefix: str = DEFAULT_WEB_PREFIX,
) -> str:
    """Validate, resize and store a local cover image for ``slug``.

    Args:
        image_path: Path to the source image as typed by the operator.
        slug: Filename stem of the reading the cover belongs to.
        images_dir: Directory the processed cover is written to; created if absent.
        web_prefix: Site-root-relative directory the website serves covers from.

    Returns:
        Site-relative path of the stored cover, e.g. ``/images/readings/1984.webp``.

    Raises:
        InvalidSlugError: if ``slug`` is not a well-formed slug.
        CoverImageProcessingError: if Pillow cannot decode or encode the image.

    """
    staged = stage_cover_image(image_path, slug, images_dir, web_prefix=web_prefix)
    staged.commit()
    return staged.web_path


__all__ = [
    "ALLOWED_EXTENSIONS",
    "COVER_EXTENSION",
    "COVER_HEIGHT",
    "COVER_QUALITY",
    "COVER_WIDTH",
    "MAX_FILE_SIZE_BYTES",
    "MAX_FILE_SIZE_MB",
    "StagedCover",
    "cover_web_path",
    "process_cover_image",
    "stage_cover_image",
    "validate_cover_url",
    "validate_image_path",
]
