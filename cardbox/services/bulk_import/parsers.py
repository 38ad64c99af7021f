"""File parsing functions for CSV, XLSX and XLS imports."""

import csv
import io
import logging
from typing import Any

import xlrd
from openpyxl import load_workbook
from xlrd.sheet import Cell

from .constants import ALLOWED_EXTENSIONS, ALLOWED_MIME_TYPES, MAX_ROWS

logger = logging.getLogger(__name__)

Rows = list[dict[str, Any]]


class SpreadsheetParseError(ValueError):
    """Raised when an uploaded file cannot be read as a spreadsheet."""


def get_file_extension(filename: str | None) -> str:
    """Extract the lowercase file extension from a filename."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def detect_file_type(filename: str | None, content_type: str | None) -> str | None:
    """Decide which reader handles an upload.

    The filename extension wins; the declared MIME type is the fallback,
    since browsers report CSV files under several MIME types.

    Returns:
        "csv", "xlsx", "xls", or None if the upload is not a spreadsheet.
    """
    ext = get_file_extension(filename)
    if ext in ALLOWED_EXTENSIONS:
        return ext
    if content_type:
        return ALLOWED_MIME_TYPES.get(content_type.split(";", 1)[0].strip().lower())
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _collect_rows(
    headers: list[tuple[int, str]],
    row_iter,
    max_rows: int,
) -> Rows:
    """Build header-keyed dicts from positional rows, skipping fully blank rows."""
    rows: Rows = []
    for row_values in row_iter:
        if len(rows) >= max_rows:
            logger.warning("Spreadsheet truncated at %d rows", max_rows)
            break
        row_dict: dict[str, Any] = {}
        for j, header in headers:
            val = row_values[j] if j < len(row_values) else None
            row_dict[header] = "" if val is None else val
        if not all(_is_blank(v) for v in row_dict.values()):
            rows.append(row_dict)
    return rows


def _header_positions(raw_headers) -> list[tuple[int, str]]:
    """Pair each non-empty header with its column index.

    Repeated header texts get a numeric suffix ("Player", "Player_1", ...) so
    every column keeps its own value in the row dicts.
    """
    positions = []
    seen: set[str] = set()
    for j, h in enumerate(raw_headers):
        text = str(h).strip() if h is not None else ""
        if not text:
            continue
        name, suffix = text, 0
        while name in seen:
            suffix += 1
            name = f"{text}_{suffix}"
        seen.add(name)
        positions.append((j, name))
    return positions


def parse_csv(file_content: bytes, max_rows: int = MAX_ROWS) -> tuple[list[str], Rows]:
    """Parse CSV file content into headers and rows.

    Tries UTF-8 (with or without a byte-order mark) first, falls back to Latin-1.

    Args:
        file_content: Raw CSV file bytes.
        max_rows: Maximum number of data rows to read.

    Returns:
        Tuple of (headers, rows) where rows are dicts keyed by header name.

    Raises:
        SpreadsheetParseError: If the CSV is empty or has no headers.
    """
    try:
        text = file_content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = file_content.decode("latin-1")

    try:
        reader = csv.reader(io.StringIO(text, newline=""))
        raw_headers = next(reader, None)
        if raw_headers is None:
            raise SpreadsheetParseError("CSV file has no headers")

        headers = _header_positions(raw_headers)
        if not headers:
            raise SpreadsheetParseError("CSV file has no valid headers")

        rows = _collect_rows(headers, reader, max_rows)
    except csv.Error as e:
        raise SpreadsheetParseError(f"CSV parsing error: {e}") from e

    return [h for _, h in headers], rows


def parse_xlsx(file_content: bytes, max_rows: int = MAX_ROWS) -> tuple[list[str], Rows]:
    """Parse XLSX file content into headers and rows (first sheet only).

    Uses openpyxl read_only mode and iterates rows lazily. Cell values keep
    their native types (numbers, booleans, datetimes).

    Raises:
        SpreadsheetParseError: If the XLSX is empty or has no headers.
    """
    wb = load_workbook(filename=io.BytesIO(file_content), read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0] if wb.worksheets else None
        if ws is None:
            raise SpreadsheetParseError("XLSX file has no worksheets")

        row_iter = ws.iter_rows(values_only=True)
        raw_headers = next(row_iter, None)
        if raw_headers is None:
            raise SpreadsheetParseError("XLSX file is empty")

        headers = _header_positions(raw_headers)
        if not headers:
            raise SpreadsheetParseError("XLSX file has no valid headers")

        rows = _collect_rows(headers, row_iter, max_rows)
    finally:
        wb.close()

    return [h for _, h in headers], rows


def _xls_cell_value(cell: Cell, datemode: int) -> Any:
    """Convert an xlrd cell to a native Python value."""
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_NUMBER and float(cell.value).is_integer():
        return int(cell.value)
    return cell.value


def parse_xls(file_content: bytes, max_rows: int = MAX_ROWS) -> tuple[list[str], Rows]:
    """Parse legacy Excel 97-2003 (.xls) content into headers and rows (first sheet only).

    Raises:
        SpreadsheetParseError: If the workbook is empty or has no headers.
    """
    book = xlrd.open_workbook(file_contents=file_content)
    if book.nsheets == 0:
        raise SpreadsheetParseError("XLS file has no worksheets")

    sheet = book.sheet_by_index(0)
    if sheet.nrows == 0:
        raise SpreadsheetParseError("XLS file is empty")

    def values(r: int) -> list[Any]:
        return [_xls_cell_value(cell, book.datemode) for cell in sheet.row(r)]

    headers = _header_positions(values(0))
    if not headers:
        raise SpreadsheetParseError("XLS file has no valid headers")

    rows = _collect_rows(headers, (values(r) for r in range(1, sheet.nrows)), max_rows)
    return [h for _, h in headers], rows


_READERS = {
    "csv": parse_csv,
    "xlsx": parse_xlsx,
    "xls": parse_xls,
}


def parse_spreadsheet(
    file_content: bytes,
    filename: str | None = None,
    content_type: str | None = None,
    max_rows: int = MAX_ROWS,
) -> tuple[list[str], Rows]:
    """Read the first sheet of an uploaded spreadsheet.

    Args:
        file_content: Raw upload bytes.
        filename: Original filename, used to pick the reader.
        content_type: Declared MIME type, used when the filename has no known extension.
        max_rows: Maximum number of data rows to read.

    Returns:
        Tuple of (headers, rows). Every row has a key for every header;
        missing cells read as "".

    Raises:
        SpreadsheetParseError: If the file type is unsupported, the content
            cannot be read, or there are no data rows.
    """
    file_type = detect_file_type(filename, content_type)
    if file_type is None:
        raise SpreadsheetParseError(
            "Invalid file type. Please upload .xlsx, .xls, or .csv file"
        )

    try:
        headers, rows = _READERS[file_type](file_content, max_rows=max_rows)
    except SpreadsheetParseError:
        raise
    except Exception as e:
        logger.warning("Failed to read %s upload '%s': %s", file_type, filename, e)
        raise SpreadsheetParseError(f"Failed to parse spreadsheet: {e}") from e

    if not rows:
        raise SpreadsheetParseError("Spreadsheet is empty or has no data rows")

    return headers, rows
