"""Exceptions raised by the reading ledger."""

from __future__ import annotations

from pathlib import Path

from vanity.exceptions import NotFoundError, SecurityRejection, ValidationError, VanityError


class EmptyTitleError(ValidationError):
    """Raised when a slug is requested for an empty or whitespace-only title."""

    def __init__(self) -> None:
        super().__init__("Title is required for slug generation")


class InvalidSlugError(ValidationError):
    """Raised when a slug cannot safely be used as a filename stem."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Invalid slug '{slug}'. Use lowercase letters, digits and hyphens only")


class InvalidDateError(ValidationError):
    """Raised when a date string is missing or not a real ``YYYY-MM-DD`` date."""

    def __init__(self, date_string: str, reason: str) -> None:
        self.date_string = date_string
        self.reason = reason
        super().__init__(reason)


class FutureDateError(InvalidDateError):
    """Raised when a finish date lies in the future."""

    def __init__(self, date_string: str) -> None:
        super().__init__(date_string, "Date cannot be in the future")


class InvalidCoverUrlError(ValidationError):
    """Raised when a cover image URL is not an absolute http(s) URL."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__("Please enter a valid URL" if url.strip() else "URL is required")


class MalformedFrontmatterError(ValidationError):
    """Raised when a reading file has unreadable YAML frontmatter."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed frontmatter in {path}: {reason}")


class ReadingExistsError(ValidationError):
    """Raised when creating a reading would overwrite an existing file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Reading file already exists: {path.name}")


class ReadingNotFoundError(NotFoundError):
    """Raised when a reading file targeted for read, update or delete is missing."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Reading file not found: {path.name}")


class CoverImageNotFoundError(ValidationError):
    """Raised when the source image for a cover does not exist."""

    def __init__(self) -> None:
        super().__init__("File not found")


class UnsupportedImageFormatError(ValidationError):
    """Raised when the source image extension is not on the allow-list."""

    def __init__(self, extension: str, allowed: tuple[str, ...]) -> None:
        self.extension = extension
        self.allowed = allowed
        super().__init__(f"Invalid image format. Allowed: {', '.join(allowed)}")


class ImageTooLargeError(ValidationError):
    """Raised when the source image exceeds the size limit."""

    def __init__(self, size_mb: float, max_size_mb: int) -> None:
        self.size_mb = size_mb
        self.max_size_mb = max_size_mb
        super().__init__(f"File too large ({size_mb:.1f}MB). Maximum size: {max_size_mb}MB")


class PathTraversalError(SecurityRejection):
    """Raised when an image path contains directory traversal markers."""

    def __init__(self) -> None:
        super().__init__("Invalid path. Directory traversal attempts are not allowed")


class EncodedPathError(SecurityRejection):
    """Raised when an image path carries percent-encoded characters."""

    def __init__(self) -> None:
        super().__init__("Invalid path. Encoded characters are not allowed")


class MalformedEncodingError(SecurityRejection):
    """Raised when an image path carries percent-escapes that cannot be decoded."""

    def __init__(self) -> None:
        super().__init__("Invalid path. Malformed URL encoding")


class CoverImageProcessingError(VanityError):
    """Raised when the image library fails to decode, resize or encode a cover."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not process image {path.name}: {reason}")
