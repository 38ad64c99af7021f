"""Bulk upload endpoints: import cards from a spreadsheet and download the template."""

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.responses import JSONResponse, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from cardbox.config import settings
from cardbox.schemas.bulk_upload import (
    AcceptedColumnsResponse,
    BulkUploadErrorResponse,
    BulkUploadResponse,
)
from cardbox.services.auth import RequireAuth
from cardbox.services.bulk_import import (
    TEMPLATE_FILENAME,
    BulkImportError,
    ImportOptions,
    LookupData,
    build_import_template,
    detect_file_type,
    get_accepted_column_names,
    load_lookup_data,
    process_bulk_upload,
)
from cardbox.services.item_store import ItemStore, get_item_store

logger = logging.getLogger(__name__)

router = APIRouter()

limiter = Limiter(key_func=get_remote_address)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
READ_CHUNK_SIZE = 64 * 1024


async def get_lookup_data() -> LookupData:
    """FastAPI dependency fetching the reference tables for this request."""
    return await load_lookup_data()


def get_lookup_loader() -> Callable[[], Awaitable[LookupData]]:
    """FastAPI dependency returning the lookup fetcher, for handlers that load lazily."""
    return load_lookup_data


LookupDeps = Annotated[LookupData, Depends(get_lookup_data)]
LookupLoaderDeps = Annotated[Callable[[], Awaitable[LookupData]], Depends(get_lookup_loader)]
StoreDeps = Annotated[ItemStore, Depends(get_item_store)]


def _rate_limit() -> str:
    return f"{settings.rate_limit_per_minute}/minute"


def _error_response(status_code: int, error: str, **extra: Any) -> JSONResponse:
    body = BulkUploadErrorResponse(error=error, **extra)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def _import_options() -> ImportOptions:
    cfg = settings.bulk_import
    return ImportOptions(
        max_rows=cfg.max_rows,
        min_year=cfg.min_year,
        max_year=cfg.max_year,
        default_status=cfg.default_status,
    )


async def _read_upload(file: UploadFile, max_bytes: int) -> bytes | None:
    """Read an upload in chunks, returning None once it exceeds max_bytes."""
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = await file.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > max_bytes:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "",
    response_model=BulkUploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": BulkUploadErrorResponse},
        413: {"model": BulkUploadErrorResponse},
        500: {"model": BulkUploadErrorResponse},
    },
)
@limiter.limit(_rate_limit)
async def bulk_upload(
    request: Request,
    current_user: RequireAuth,
    load_lookups: LookupLoaderDeps,
    store: StoreDeps,
    file: UploadFile | None = File(None, description="XLSX, XLS or CSV spreadsheet"),
) -> BulkUploadResponse | JSONResponse:
    """Import every row of a spreadsheet as a card, all or nothing.

    Rows are validated first; if any row has a missing title or category, an
    unknown category, or an out-of-range year or grade, nothing is imported
    and every problem is reported.
    """
    if file is None:
        return _error_response(status.HTTP_400_BAD_REQUEST, "No file uploaded")

    if detect_file_type(file.filename, file.content_type) is None:
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "Invalid file type. Please upload .xlsx, .xls, or .csv file",
        )

    content = await _read_upload(file, settings.max_upload_size_bytes)
    if content is None:
        return _error_response(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            f"File exceeds maximum size of {settings.max_upload_size_mb} MB",
        )

    lookups = await load_lookups()
    try:
        report = await process_bulk_upload(
            owner_id=current_user,
            file_content=content,
            filename=file.filename,
            content_type=file.content_type,
            lookups=lookups,
            store=store,
            options=_import_options(),
        )
    except BulkImportError as e:
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to import cards",
            details=str(e),
            column_mapping=e.report.column_mapping,
            ignored_columns=e.report.ignored_columns,
        )

    if report.parse_errors:
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "Failed to parse spreadsheet",
            details=report.parse_errors,
        )

    if report.errors:
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation failed",
            details=report.errors,
            column_mapping=report.column_mapping,
            ignored_columns=report.ignored_columns,
        )

    count = report.imported_count
    return BulkUploadResponse(
        imported_count=count,
        column_mapping=report.column_mapping,
        ignored_columns=report.ignored_columns,
        message=f"Successfully imported {count} card{'' if count == 1 else 's'}",
    )


@router.get("/template")
async def download_template(
    current_user: RequireAuth,
    lookups: LookupDeps,
) -> Response:
    """Download an XLSX template with example data and the valid lookup values."""
    content = build_import_template(lookups, default_status=settings.bulk_import.default_status)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={TEMPLATE_FILENAME}"},
    )


@router.get("/columns", response_model=AcceptedColumnsResponse)
async def accepted_columns(current_user: RequireAuth) -> AcceptedColumnsResponse:
    """List the accepted column header variations for each card field."""
    return AcceptedColumnsResponse(columns=get_accepted_column_names())
