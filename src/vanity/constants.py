"""Central location for enums and fixed values shared across the application."""

from enum import Enum

MARKDOWN_EXTENSION = ".md"


class RereadAction(str, Enum):
    """Operator decisions when a reading for the same work already exists."""

    REREAD = "reread"
    UPDATE = "update"
    CANCEL = "cancel"


class CoverChoice(str, Enum):
    """Ways of attaching a cover image while adding a reading."""

    URL = "url"
    LOCAL = "local"
    SKIP = "skip"


class CoverUpdateChoice(str, Enum):
    """Ways of changing the cover image of an existing reading."""

    URL = "url"
    LOCAL = "local"
    REMOVE = "remove"
    CANCEL = "cancel"


class FlowState(str, Enum):
    """States of the add-reading conversation."""

    COLLECTING_BASICS = "collecting_basics"
    CHECKING_EXISTING = "checking_existing"
    CREATING = "creating"
    DECIDING = "deciding"
    COLLECTING_METADATA = "collecting_metadata"
    COLLECTING_IMAGE = "collecting_image"
    PREVIEWING = "previewing"
    PERSISTED = "persisted"
    CANCELLED = "cancelled"


class FlowOutcome(str, Enum):
    """How an interactive flow ended."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    CANCELLED = "cancelled"
    UNCHANGED = "unchanged"


class UpdateAction(str, Enum):
    """Single-field edits offered by the update wizard."""

    FINISH_TODAY = "finish_today"
    FINISH_CUSTOM = "finish_custom"
    TITLE = "title"
    AUTHOR = "author"
    COVER = "cover"
    AUDIOBOOK = "audiobook"
    FAVORITE = "favorite"
    DELETE = "delete"
    CANCEL = "cancel"


class AdvisoryKind(str, Enum):
    """Kinds of non-fatal findings about a reread group."""

    MISSING_BASE = "missing-base"
    SEQUENCE_GAP = "sequence-gap"
    DUPLICATE_SEQUENCE = "duplicate-sequence"
    LARGE_GROUP = "large-group"
