"""Pydantic schemas for spreadsheet bulk upload."""

from pydantic import BaseModel, Field

from cardbox.services.bulk_import import RowValidationError


class BulkUploadResponse(BaseModel):
    """Response after a successful bulk import."""

    success: bool = True
    imported_count: int
    column_mapping: dict[str, str]
    ignored_columns: list[str]
    message: str


class BulkUploadErrorResponse(BaseModel):
    """Response when a bulk import is rejected or fails.

    Column mapping and ignored columns are included whenever the file could be
    read, so users can see which headers were not recognised.
    """

    error: str
    details: list[RowValidationError] | list[str] | str = Field(default_factory=list)
    column_mapping: dict[str, str] | None = None
    ignored_columns: list[str] | None = None


class AcceptedColumnsResponse(BaseModel):
    """Accepted header variations per card field."""

    columns: dict[str, list[str]]
