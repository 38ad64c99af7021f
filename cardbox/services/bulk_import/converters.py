"""Row transformation and value coercion for card imports."""

import math
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from .constants import (
    BOOLEAN_FIELDS,
    DECIMAL_FIELDS,
    INTEGER_FIELDS,
    TRUE_STRINGS,
)

# Header row is file row 1, so data row index 0 is file row 2
ROW_NUMBER_OFFSET = 2

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")


class CanonicalRow(BaseModel):
    """One spreadsheet row keyed by canonical field, with typed values."""

    model_config = ConfigDict(frozen=True)

    row_number: int
    values: dict[str, Any]

    def get(self, field: str) -> Any:
        """Value of a field, or None if the column was not in the file."""
        return self.values.get(field)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_boolean(value: Any) -> bool:
    """Interpret a spreadsheet cell as a yes/no flag.

    Unrecognised text is treated as False rather than rejected.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return str(value).lower().strip() in TRUE_STRINGS


def coerce_int(value: Any) -> int | None:
    """Try to coerce a cell to a base-10 integer (decimals truncate)."""
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return int(text, 10)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if math.isfinite(number) else None


def coerce_decimal(value: Any) -> float | None:
    """Try to coerce a cell to a float, ignoring currency symbols and thousands separators."""
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.replace("$", "").replace(",", "").strip()
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def coerce_date(value: Any) -> datetime | None:
    """Coerce a listing/sale date cell to a datetime.

    Accepts native dates and the template's YYYY-MM-DD and MM/DD/YYYY text formats.

    Raises:
        ValueError: If the cell holds text in any other format.
    """
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(
            f"Invalid date '{text}'. Use YYYY-MM-DD or MM/DD/YYYY"
        ) from None


def coerce_text(value: Any) -> str | None:
    """Render a cell as text for a string field.

    Numeric cells typed into text columns (a set name of 2020, say) keep
    their spreadsheet spelling: whole floats lose the trailing ".0".
    """
    if _is_blank(value):
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_tags(value: Any) -> list[str] | None:
    """Split a comma-separated tag cell into trimmed, non-empty tags."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = coerce_text(value)
    if not isinstance(value, str):
        return None
    tags = [tag.strip() for tag in value.split(",")]
    tags = [tag for tag in tags if tag]
    return tags or None


def transform_value(field: str, value: Any) -> Any:
    """Coerce one cell according to its canonical field."""
    if _is_blank(value):
        return None
    if field in BOOLEAN_FIELDS:
        return parse_boolean(value)
    if field in INTEGER_FIELDS:
        return coerce_int(value)
    if field in DECIMAL_FIELDS:
        return coerce_decimal(value)
    if isinstance(value, str):
        return value.strip()
    return value


def transform_row(row: dict[str, Any], mapping: dict[str, str], index: int) -> CanonicalRow:
    """Convert a raw spreadsheet row (keyed by header) to a CanonicalRow.

    Args:
        row: Raw row dict from the spreadsheet reader.
        mapping: Column mapping (raw header -> canonical field).
        index: 0-based position among data rows.
    """
    values = {
        field: transform_value(field, row.get(header, ""))
        for header, field in mapping.items()
    }
    return CanonicalRow(row_number=index + ROW_NUMBER_OFFSET, values=values)


def transform_rows(rows: list[dict[str, Any]], mapping: dict[str, str]) -> list[CanonicalRow]:
    """Transform every raw row, preserving order."""
    return [transform_row(row, mapping, i) for i, row in enumerate(rows)]
