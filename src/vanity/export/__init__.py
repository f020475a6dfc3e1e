"""Build-time export of reading data for the website."""

from vanity.export.static_data import (
    GENERATOR_VERSION,
    ExportReport,
    calculate_content_hash,
    export_static_data,
    generate_readings_data,
    should_skip_generation,
)

__all__ = [
    "GENERATOR_VERSION",
    "ExportReport",
    "calculate_content_hash",
    "export_static_data",
    "generate_readings_data",
    "should_skip_generation",
]
