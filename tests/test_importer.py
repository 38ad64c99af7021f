"""Tests for resolving rows to item records and the transactional bulk insert."""

from datetime import datetime

import pytest

from cardbox.services.bulk_import import (
    CanonicalRow,
    LookupData,
    LookupMaps,
    build_lookup_map,
    bulk_create_items,
    find_default_status,
    resolve_row,
)
from tests.conftest import FakeItemStore


def _row(row_number: int = 2, **values) -> CanonicalRow:
    return CanonicalRow(row_number=row_number, values=values)


# =============================================================================
# Row resolution
# =============================================================================


def test_resolve_row_maps_names_to_ids(lookups: LookupData) -> None:
    maps = LookupMaps.from_lookup_data(lookups)
    row = _row(
        title="2020 Prizm Mahomes",
        category="football",
        status="LISTED",
        grading_company="psa",
        condition="Near Mint",
        player_name="Patrick Mahomes",
        year=2020,
        rookie=True,
        grade_value=10.0,
        market_value=1500.0,
        tags="QB, Chiefs",
        date_listed="2024-01-15",
    )

    record = resolve_row(row, maps, default_status_id=7, owner_id="user-1")

    assert record["owner_id"] == "user-1"
    assert record["title"] == "2020 Prizm Mahomes"
    assert record["category_id"] == 1
    assert record["status_id"] == 5
    assert record["grading_company_id"] == 12
    assert record["condition_id"] == 22
    assert record["player_name"] == "Patrick Mahomes"
    assert record["year"] == 2020
    assert record["rookie"] is True
    assert record["autograph"] is False
    assert record["grade_value"] == 10.0
    assert record["market_value"] == 1500.0
    assert record["tags"] == ["QB", "Chiefs"]
    assert record["date_listed"] == datetime(2024, 1, 15)
    assert record["date_sold"] is None
    assert record["image_url"] is None


def test_missing_status_uses_default(lookups: LookupData) -> None:
    """A row without a status gets the Unlisted status id."""
    maps = LookupMaps.from_lookup_data(lookups)
    record = resolve_row(_row(title="Card", category="Football", status=None), maps, 7, "user-1")
    assert record["status_id"] == 7


def test_unknown_status_uses_default(lookups: LookupData) -> None:
    maps = LookupMaps.from_lookup_data(lookups)
    record = resolve_row(_row(title="Card", category="Football", status="On Hold"), maps, 7, "u")
    assert record["status_id"] == 7


def test_unknown_grading_company_and_condition_are_null(lookups: LookupData) -> None:
    maps = LookupMaps.from_lookup_data(lookups)
    record = resolve_row(
        _row(title="Card", category="Football", grading_company="Unknown Co", condition="Battered"),
        maps,
        7,
        "u",
    )
    assert record["grading_company_id"] is None
    assert record["condition_id"] is None


def test_zero_values_are_kept(lookups: LookupData) -> None:
    maps = LookupMaps.from_lookup_data(lookups)
    record = resolve_row(
        _row(title="Card", category="Football", grade_value=0.0, patch_count=0, market_value=0.0),
        maps,
        7,
        "u",
    )
    assert record["grade_value"] == 0.0
    assert record["patch_count"] == 0
    assert record["market_value"] == 0.0


def test_numeric_text_fields_become_strings(lookups: LookupData) -> None:
    maps = LookupMaps.from_lookup_data(lookups)
    record = resolve_row(
        _row(title=2020, category="Football", brand=1.0, sub_brand=2020.0, ebay_url=None),
        maps,
        7,
        "u",
    )
    assert record["title"] == "2020"
    assert record["brand"] == "1"
    assert record["sub_brand"] == "2020"
    assert record["ebay_url"] is None


def test_bad_date_raises(lookups: LookupData) -> None:
    maps = LookupMaps.from_lookup_data(lookups)
    with pytest.raises(ValueError, match="Invalid date"):
        resolve_row(_row(title="Card", category="Football", date_sold="soon"), maps, 7, "u")


def test_duplicate_lookup_names_last_wins() -> None:
    lookups = LookupData(
        categories=[
            {"id": 1, "name": "Football"},
            {"id": 9, "name": "FOOTBALL"},
        ]
    )
    maps = LookupMaps.from_lookup_data(lookups)
    record = resolve_row(_row(title="Card", category="football"), maps, None, "u")
    assert record["category_id"] == 9


# =============================================================================
# Transactional insert
# =============================================================================


@pytest.mark.asyncio
async def test_bulk_create_items_commits_all(lookups: LookupData) -> None:
    store = FakeItemStore()
    rows = [_row(i + 2, title=f"Card {i}", category="Baseball") for i in range(3)]

    result = await bulk_create_items("user-1", rows, lookups, store)

    assert result.success is True
    assert result.imported_count == 3
    assert [r["title"] for r in result.created_records] == ["Card 0", "Card 1", "Card 2"]
    assert len(store.committed) == 3
    assert store.transactions_opened == 1
    assert all(r["status_id"] == 7 for r in store.committed)


@pytest.mark.asyncio
async def test_failure_on_fourth_row_keeps_nothing(lookups: LookupData) -> None:
    """A storage error on row 4 of 5 rolls back rows 1-3."""
    store = FakeItemStore(fail_on=4)
    rows = [_row(i + 2, title=f"Card {i}", category="Football") for i in range(5)]

    with pytest.raises(RuntimeError, match="duplicate key"):
        await bulk_create_items("user-1", rows, lookups, store)

    assert store.committed == []
    assert store.rolled_back == 1


@pytest.mark.asyncio
async def test_bad_date_rolls_back(lookups: LookupData) -> None:
    store = FakeItemStore()
    rows = [
        _row(2, title="Good", category="Football", date_listed="2024-01-15"),
        _row(3, title="Bad", category="Football", date_listed="someday"),
    ]

    with pytest.raises(ValueError):
        await bulk_create_items("user-1", rows, lookups, store)

    assert store.committed == []


@pytest.mark.asyncio
async def test_unknown_grading_company_imports_as_null(lookups: LookupData) -> None:
    store = FakeItemStore()
    rows = [
        _row(2, title="A", category="Football", grading_company="PSA"),
        _row(3, title="B", category="Football", grading_company="Unknown Co"),
    ]

    result = await bulk_create_items("user-1", rows, lookups, store)

    assert result.imported_count == 2
    assert store.committed[0]["grading_company_id"] == 12
    assert store.committed[1]["grading_company_id"] is None


@pytest.mark.asyncio
async def test_missing_default_status_leaves_status_null(lookups: LookupData) -> None:
    store = FakeItemStore()
    rows = [_row(title="A", category="Football")]

    await bulk_create_items("user-1", rows, lookups, store, default_status="Archived")

    assert store.committed[0]["status_id"] is None


# =============================================================================
# Lookup helpers
# =============================================================================


def test_find_default_status_case_insensitive(lookups: LookupData) -> None:
    assert find_default_status(lookups.statuses).id == 7
    assert find_default_status(lookups.statuses, "sold").id == 6
    assert find_default_status(lookups.statuses, "Archived") is None


def test_build_lookup_map_keys_lowercased(lookups: LookupData) -> None:
    grading = build_lookup_map(lookups.grading_companies)
    assert set(grading) == {"bgs", "psa"}
    assert grading["psa"].id == 12
