"""Pydantic schemas for CardBox API."""

from cardbox.schemas.bulk_upload import (
    AcceptedColumnsResponse,
    BulkUploadErrorResponse,
    BulkUploadResponse,
)

__all__ = [
    "AcceptedColumnsResponse",
    "BulkUploadErrorResponse",
    "BulkUploadResponse",
]
