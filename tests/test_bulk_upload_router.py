"""API tests for the bulk upload endpoints."""

import io

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook

from cardbox.services.bulk_import import COLUMN_SYNONYMS
from tests.conftest import FakeItemStore, make_csv, make_xlsx

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# =============================================================================
# POST /api/bulk-upload
# =============================================================================


@pytest.mark.asyncio
async def test_upload_xlsx_success(client: AsyncClient, item_store: FakeItemStore) -> None:
    content = make_xlsx(
        ["Title", "Category", "Player Name", "Year", "Shelf"],
        [
            ["2020 Prizm Mahomes", "Football", "Patrick Mahomes", 2020, "A1"],
            ["2011 Update Trout", "baseball", "Mike Trout", 2011, "A2"],
        ],
    )

    response = await client.post(
        "/api/bulk-upload",
        files={"file": ("cards.xlsx", content, XLSX_TYPE)},
    )

    assert response.status_code == 201
    data = response.json()
    assert data == {
        "success": True,
        "imported_count": 2,
        "column_mapping": {
            "Title": "title",
            "Category": "category",
            "Player Name": "player_name",
            "Year": "year",
        },
        "ignored_columns": ["Shelf"],
        "message": "Successfully imported 2 cards",
    }
    assert [r["category_id"] for r in item_store.committed] == [1, 2]
    assert all(r["owner_id"] == "user-1" for r in item_store.committed)


@pytest.mark.asyncio
async def test_upload_single_card_message(client: AsyncClient) -> None:
    content = make_csv(["Title,Sport", "Card A,Football"])
    response = await client.post(
        "/api/bulk-upload",
        files={"file": ("cards.csv", content, "text/csv")},
    )
    assert response.status_code == 201
    assert response.json()["message"] == "Successfully imported 1 card"


@pytest.mark.asyncio
async def test_upload_validation_errors(client: AsyncClient, item_store: FakeItemStore) -> None:
    content = make_csv(
        [
            "Title,Category,Year,Grade,Misc",
            "Card A,Football,2020,9,x",
            ",Curling,1850,11,y",
        ]
    )

    response = await client.post(
        "/api/bulk-upload",
        files={"file": ("cards.csv", content, "text/csv")},
    )

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Validation failed"
    assert [(d["row_number"], d["field"]) for d in data["details"]] == [
        (3, "title"),
        (3, "category"),
        (3, "year"),
        (3, "grade_value"),
    ]
    assert data["column_mapping"]["Grade"] == "grade_value"
    assert data["ignored_columns"] == ["Misc"]
    assert item_store.committed == []


@pytest.mark.asyncio
async def test_upload_without_file(client: AsyncClient) -> None:
    response = await client.post("/api/bulk-upload")
    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded", "details": []}


@pytest.mark.asyncio
async def test_upload_wrong_type(client: AsyncClient) -> None:
    response = await client.post(
        "/api/bulk-upload",
        files={"file": ("cards.pdf", b"%PDF-1.4", "application/pdf")},
    )
    assert response.status_code == 400
    assert response.json()["error"] == (
        "Invalid file type. Please upload .xlsx, .xls, or .csv file"
    )


@pytest.mark.asyncio
async def test_upload_too_large(client: AsyncClient, monkeypatch) -> None:
    from cardbox.config import settings
    from cardbox.config.settings import Settings

    monkeypatch.setattr(Settings, "max_upload_size_bytes", property(lambda self: 16))
    response = await client.post(
        "/api/bulk-upload",
        files={"file": ("cards.csv", make_csv(["Title,Category", "Card A,Football"]), "text/csv")},
    )
    assert response.status_code == 413
    assert response.json()["error"] == (
        f"File exceeds maximum size of {settings.max_upload_size_mb} MB"
    )



@pytest.mark.asyncio
async def test_rejected_uploads_skip_lookup_queries(app, client: AsyncClient, lookups) -> None:
    """Lookup tables are only fetched once the file passes the upload checks."""
    from cardbox.routers.bulk_upload import get_lookup_loader

    calls = []

    async def load_lookups():
        calls.append(1)
        return lookups

    app.dependency_overrides[get_lookup_loader] = lambda: load_lookups

    await client.post("/api/bulk-upload")
    await client.post(
        "/api/bulk-upload",
        files={"file": ("cards.pdf", b"%PDF-1.4", "application/pdf")},
    )
    assert calls == []

    response = await client.post(
        "/api/bulk-upload",
        files={"file": ("cards.csv", make_csv(["Title,Category", "Card A,Football"]), "text/csv")},
    )
    assert response.status_code == 201
    assert calls == [1]

@pytest.mark.asyncio
async def test_upload_unreadable_file(client: AsyncClient) -> None:
    response = await client.post(
        "/api/bulk-upload",
        files={"file": ("cards.xlsx", b"not a workbook", XLSX_TYPE)},
    )
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Failed to parse spreadsheet"
    assert data["details"][0].startswith("Failed to parse spreadsheet:")


@pytest.mark.asyncio
async def test_upload_storage_failure(client: AsyncClient, item_store: FakeItemStore) -> None:
    item_store.fail_on = 2
    content = make_csv(
        ["Title,Category,Mystery", "A,Football,x", "B,Football,y", "C,Football,z"]
    )

    response = await client.post(
        "/api/bulk-upload",
        files={"file": ("cards.csv", content, "text/csv")},
    )

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to import cards",
        "details": "duplicate key error",
        "column_mapping": {"Title": "title", "Category": "category"},
        "ignored_columns": ["Mystery"],
    }
    assert item_store.committed == []


@pytest.mark.asyncio
async def test_upload_requires_auth(app, client: AsyncClient) -> None:
    from cardbox.services.auth import require_auth

    del app.dependency_overrides[require_auth]
    response = await client.post(
        "/api/bulk-upload",
        files={"file": ("cards.csv", make_csv(["Title,Category", "A,Football"]), "text/csv")},
    )
    assert response.status_code == 401


# =============================================================================
# Template and accepted columns
# =============================================================================


@pytest.mark.asyncio
async def test_download_template(client: AsyncClient) -> None:
    response = await client.get("/api/bulk-upload/template")

    assert response.status_code == 200
    assert response.headers["content-type"] == XLSX_TYPE
    assert "CardBox_Import_Template.xlsx" in response.headers["content-disposition"]
    wb = load_workbook(io.BytesIO(response.content))
    assert wb.sheetnames == ["Card Data", "Instructions"]


@pytest.mark.asyncio
async def test_accepted_columns(client: AsyncClient) -> None:
    response = await client.get("/api/bulk-upload/columns")
    assert response.status_code == 200
    columns = response.json()["columns"]
    assert set(columns) == set(COLUMN_SYNONYMS)
    assert "card title" in columns["title"]
