"""End-to-end processing of one bulk upload: parse, map, validate, import."""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from cardbox.services.item_store import ItemStore

from .constants import DEFAULT_STATUS_NAME, MAX_GRADE, MAX_ROWS, MAX_YEAR, MIN_GRADE, MIN_YEAR
from .converters import transform_rows
from .importer import bulk_create_items
from .lookups import LookupData
from .mapping import map_column_headers
from .parsers import SpreadsheetParseError, parse_spreadsheet
from .validation import RowValidationError, validate_rows

logger = logging.getLogger(__name__)


class ImportState(str, Enum):
    """Lifecycle of a single import request."""

    RECEIVED = "received"
    PARSED = "parsed"
    VALIDATED = "validated"
    REJECTED = "rejected"
    COMMITTING = "committing"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class BulkImportError(RuntimeError):
    """Raised when storing an import fails; nothing from the file was kept."""

    def __init__(self, message: str, report: "BulkImportReport"):
        super().__init__(message)
        self.report = report


class ImportOptions(BaseModel):
    """Tunable limits for one import."""

    max_rows: int = MAX_ROWS
    min_year: int = MIN_YEAR
    max_year: int = MAX_YEAR
    min_grade: float = MIN_GRADE
    max_grade: float = MAX_GRADE
    default_status: str = DEFAULT_STATUS_NAME


class BulkImportReport(BaseModel):
    """What happened to one uploaded file."""

    state: ImportState = ImportState.RECEIVED
    column_mapping: dict[str, str] = Field(default_factory=dict)
    ignored_columns: list[str] = Field(default_factory=list)
    parse_errors: list[str] = Field(default_factory=list)
    errors: list[RowValidationError] = Field(default_factory=list)
    imported_count: int = 0
    created_records: list[Any] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state == ImportState.COMMITTED

    def advance(self, state: ImportState) -> None:
        logger.debug("Bulk import %s -> %s", self.state.value, state.value)
        self.state = state


async def process_bulk_upload(
    owner_id: str,
    file_content: bytes,
    filename: str | None,
    content_type: str | None,
    lookups: LookupData,
    store: ItemStore,
    options: ImportOptions | None = None,
) -> BulkImportReport:
    """Run one uploaded spreadsheet through the import pipeline.

    Parse and validation problems end in the REJECTED state without touching
    storage. A storage failure rolls the transaction back and raises
    BulkImportError carrying the report.

    Args:
        owner_id: User performing the import.
        file_content: Raw upload bytes.
        filename: Original filename.
        content_type: Declared MIME type.
        lookups: Reference tables fetched for this request.
        store: Item store for the transactional insert.
        options: Limits; defaults apply when omitted.

    Returns:
        BulkImportReport in the COMMITTED or REJECTED state.

    Raises:
        BulkImportError: If persistence failed (state ROLLED_BACK).
    """
    opts = options or ImportOptions()
    report = BulkImportReport()

    try:
        headers, raw_rows = parse_spreadsheet(
            file_content, filename, content_type, max_rows=opts.max_rows
        )
    except SpreadsheetParseError as e:
        logger.info("Rejected upload '%s' from %s: %s", filename, owner_id, e)
        report.parse_errors = [str(e)]
        report.advance(ImportState.REJECTED)
        return report

    report.column_mapping, report.ignored_columns = map_column_headers(headers)
    rows = transform_rows(raw_rows, report.column_mapping)
    report.advance(ImportState.PARSED)
    if report.ignored_columns:
        logger.info("Ignoring unmapped columns: %s", ", ".join(report.ignored_columns))

    validation = validate_rows(
        rows,
        lookups,
        min_year=opts.min_year,
        max_year=opts.max_year,
        min_grade=opts.min_grade,
        max_grade=opts.max_grade,
    )
    report.advance(ImportState.VALIDATED)
    if not validation.valid:
        report.errors = validation.errors
        report.advance(ImportState.REJECTED)
        logger.info(
            "Rejected upload '%s' from %s: %d validation errors in %d rows",
            filename,
            owner_id,
            len(validation.errors),
            len(rows),
        )
        return report

    report.advance(ImportState.COMMITTING)
    try:
        result = await bulk_create_items(
            owner_id,
            rows,
            lookups,
            store,
            default_status=opts.default_status,
        )
    except Exception as e:
        report.advance(ImportState.ROLLED_BACK)
        logger.error("Bulk import of '%s' rolled back: %s", filename, e)
        raise BulkImportError(str(e), report) from e

    report.imported_count = result.imported_count
    report.created_records = result.created_records
    report.advance(ImportState.COMMITTED)
    return report
