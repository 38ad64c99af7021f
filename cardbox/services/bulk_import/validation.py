"""Row validation for card imports.

Two failure tiers apply. A missing title, a missing or unknown category, or an
out-of-range year or grade rejects the whole import. Unknown status, grading
company or condition names are not errors; the importer stores them as null
(status falls back to the default status).
"""

import math
from numbers import Real
from typing import Any

from pydantic import BaseModel, Field

from .constants import MAX_GRADE, MAX_YEAR, MIN_GRADE, MIN_YEAR
from .converters import CanonicalRow
from .lookups import LookupData, build_lookup_map, lookup_key


class RowValidationError(BaseModel):
    """A problem with one field of one spreadsheet row."""

    row_number: int
    field: str
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating every row of an import."""

    valid: bool
    errors: list[RowValidationError] = Field(default_factory=list)


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _is_whole_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def validate_row(
    row: CanonicalRow,
    category_map: dict,
    category_names: str,
    min_year: int = MIN_YEAR,
    max_year: int = MAX_YEAR,
    min_grade: float = MIN_GRADE,
    max_grade: float = MAX_GRADE,
) -> list[RowValidationError]:
    """Check one row. Every check runs, so a row can report several errors."""
    errors: list[RowValidationError] = []

    def fail(field: str, message: str) -> None:
        errors.append(RowValidationError(row_number=row.row_number, field=field, message=message))

    if _is_blank(row.get("title")):
        fail("title", "Title is required")

    category = row.get("category")
    if _is_blank(category):
        fail("category", "Category is required")
    elif lookup_key(category) not in category_map:
        fail("category", f"Invalid category '{category}'. Must be: {category_names}")

    year = row.get("year")
    if year is not None:
        if not _is_whole_number(year) or not min_year <= year <= max_year:
            fail("year", f"Invalid year '{year}'. Must be between {min_year} and {max_year}")

    grade = row.get("grade_value")
    if grade is not None:
        if not _is_finite_number(grade) or not min_grade <= grade <= max_grade:
            fail(
                "grade_value",
                f"Invalid grade value '{grade}'. Must be between {min_grade} and {max_grade}",
            )

    return errors


def validate_rows(
    rows: list[CanonicalRow],
    lookups: LookupData,
    *,
    min_year: int = MIN_YEAR,
    max_year: int = MAX_YEAR,
    min_grade: float = MIN_GRADE,
    max_grade: float = MAX_GRADE,
) -> ValidationResult:
    """Validate all rows against required fields, ranges and the category table.

    Errors are collected for every row (not fail-fast) so the whole file can
    be corrected in one pass.

    Args:
        rows: Transformed rows in file order.
        lookups: Reference tables fetched for this import.

    Returns:
        ValidationResult; valid is True only when there are no errors.
    """
    category_map = build_lookup_map(lookups.categories)
    category_names = ", ".join(c.name for c in lookups.categories)

    errors: list[RowValidationError] = []
    for row in rows:
        errors.extend(
            validate_row(
                row,
                category_map,
                category_names,
                min_year=min_year,
                max_year=max_year,
                min_grade=min_grade,
                max_grade=max_grade,
            )
        )

    return ValidationResult(valid=not errors, errors=errors)
