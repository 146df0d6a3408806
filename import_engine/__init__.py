"""
import_engine - CSV / spreadsheet grade import pipeline.

Public API:
    run_import(owner_id, file_content, file_kind, field_mapping) → ImportReport
    read_headers(file_content, file_kind) → [header, …]
"""

from import_engine.importer import run_import                     # noqa: F401
from import_engine.report import ImportReport, ImportStatistics   # noqa: F401
from import_engine.field_map import FieldMapping, MappingError    # noqa: F401
from import_engine.file_parser import (                            # noqa: F401
    detect_kind, read_headers, UnsupportedFormat, DecodeError,
)
