"""Reading records: filenames, rereads, frontmatter, covers and the interactive flows."""

from vanity.readings.catalog import ReadingCatalog, ReadingEntry, load_catalog, sort_by_finished
from vanity.readings.covers import (
    StagedCover,
    process_cover_image,
    stage_cover_image,
    validate_cover_url,
    validate_image_path,
)
from vanity.readings.flow import AddReadingFlow, FlowResult, ReadingPrompter
from vanity.readings.frontmatter import (
    ReadingDocument,
    create_reading_frontmatter,
    delete_reading,
    read_reading,
    update_field,
    write_reading,
)
from vanity.readings.models import ReadingRecord
from vanity.readings.rereads import (
    MostRecentReading,
    build_reread_map,
    compute_read_count,
    find_existing_readings,
    get_most_recent_reading,
    resolve_slug,
)
from vanity.readings.slugs import SlugInfo, allocate_next_filename, parse_slug, slugify
from vanity.readings.update import UpdatePrompter, UpdateReadingFlow
from vanity.readings.validation import SequenceAdvisory, validate_reread_sequences

__all__ = [
    "AddReadingFlow",
    "FlowResult",
    "MostRecentReading",
    "ReadingCatalog",
    "ReadingDocument",
    "ReadingEntry",
    "ReadingPrompter",
    "ReadingRecord",
    "SequenceAdvisory",
    "SlugInfo",
    "StagedCover",
    "UpdatePrompter",
    "UpdateReadingFlow",
    "allocate_next_filename",
    "build_reread_map",
    "compute_read_count",
    "create_reading_frontmatter",
    "delete_reading",
    "find_existing_readings",
    "get_most_recent_reading",
    "load_catalog",
    "parse_slug",
    "process_cover_image",
    "read_reading",
    "resolve_slug",
    "slugify",
    "sort_by_finished",
    "stage_cover_image",
    "update_field",
    "validate_cover_url",
    "validate_image_path",
    "validate_reread_sequences",
    "write_reading",
]
