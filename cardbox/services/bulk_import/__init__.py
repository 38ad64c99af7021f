"""Bulk import service package: spreadsheet parsing, column mapping, validation and transactional import."""

from .constants import (
    CANONICAL_FIELDS,
    COLUMN_SYNONYMS,
    MAX_ROWS,
)
from .converters import (
    CanonicalRow,
    coerce_date,
    coerce_decimal,
    coerce_int,
    coerce_text,
    parse_boolean,
    parse_tags,
    transform_row,
    transform_rows,
    transform_value,
)
from .importer import ImportResult, bulk_create_items, resolve_row
from .lookups import (
    LookupData,
    LookupEntry,
    LookupMaps,
    build_lookup_map,
    find_default_status,
    load_lookup_data,
)
from .mapping import get_accepted_column_names, map_column_headers, normalize_header
from .parsers import (
    SpreadsheetParseError,
    detect_file_type,
    parse_csv,
    parse_spreadsheet,
    parse_xls,
    parse_xlsx,
)
from .processor import (
    BulkImportError,
    BulkImportReport,
    ImportOptions,
    ImportState,
    process_bulk_upload,
)
from .template import TEMPLATE_FILENAME, build_import_template
from .validation import RowValidationError, ValidationResult, validate_row, validate_rows

__all__ = [
    # Constants
    "CANONICAL_FIELDS",
    "COLUMN_SYNONYMS",
    "MAX_ROWS",
    # Parsers
    "SpreadsheetParseError",
    "detect_file_type",
    "parse_csv",
    "parse_spreadsheet",
    "parse_xls",
    "parse_xlsx",
    # Mapping
    "get_accepted_column_names",
    "map_column_headers",
    "normalize_header",
    # Converters
    "CanonicalRow",
    "coerce_date",
    "coerce_decimal",
    "coerce_int",
    "coerce_text",
    "parse_boolean",
    "parse_tags",
    "transform_row",
    "transform_rows",
    "transform_value",
    # Lookups
    "LookupData",
    "LookupEntry",
    "LookupMaps",
    "build_lookup_map",
    "find_default_status",
    "load_lookup_data",
    # Validation
    "RowValidationError",
    "ValidationResult",
    "validate_row",
    "validate_rows",
    # Import
    "ImportResult",
    "bulk_create_items",
    "resolve_row",
    # Processor
    "BulkImportError",
    "BulkImportReport",
    "ImportOptions",
    "ImportState",
    "process_bulk_upload",
    # Template
    "TEMPLATE_FILENAME",
    "build_import_template",
]
