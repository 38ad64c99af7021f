"""All-or-nothing bulk creation of items from validated rows."""

import logging
from typing import Any

from pydantic import BaseModel, Field

from cardbox.services.item_store import ItemStore

from .constants import DATE_FIELDS, DEFAULT_STATUS_NAME, TEXT_FIELDS
from .converters import CanonicalRow, coerce_date, coerce_text, parse_tags
from .lookups import LookupData, LookupEntry, LookupMaps, find_default_status, lookup_key

logger = logging.getLogger(__name__)

# Canonical fields copied onto the item unchanged (blank -> None)
_PASSTHROUGH_FIELDS = (
    "year",
    "numbered_to",
    "patch_count",
    "grade_value",
    "market_value",
    "price_listed",
)


class ImportResult(BaseModel):
    """Successful bulk import summary."""

    success: bool = True
    imported_count: int
    created_records: list[Any] = Field(default_factory=list)


def _resolve_id(lookup_map: dict[str, LookupEntry], value: Any) -> int | None:
    """Map a lookup name to its id; blank or unknown names give None."""
    if value is None or not str(value).strip():
        return None
    entry = lookup_map.get(lookup_key(value))
    return entry.id if entry else None


def resolve_row(
    row: CanonicalRow,
    maps: LookupMaps,
    default_status_id: int | None,
    owner_id: str,
) -> dict[str, Any]:
    """Build the insert record for one validated row.

    Category is guaranteed to resolve (rows with unknown categories never pass
    validation). Status falls back to the default status; grading company
    and condition fall back to None.

    Raises:
        ValueError: If a date cell cannot be parsed.
    """
    status_id = _resolve_id(maps.statuses, row.get("status"))
    if status_id is None:
        status_id = default_status_id

    record: dict[str, Any] = {
        "owner_id": owner_id,
        "category_id": maps.categories[lookup_key(row.get("category"))].id,
        "status_id": status_id,
        "grading_company_id": _resolve_id(maps.grading_companies, row.get("grading_company")),
        "condition_id": _resolve_id(maps.conditions, row.get("condition")),
        "rookie": bool(row.get("rookie")),
        "autograph": bool(row.get("autograph")),
        "tags": parse_tags(row.get("tags")),
        "image_url": None,
    }
    for field in TEXT_FIELDS:
        record[field] = coerce_text(row.get(field))
    for field in _PASSTHROUGH_FIELDS:
        record[field] = row.get(field)
    for field in DATE_FIELDS:
        record[field] = coerce_date(row.get(field))

    return record


async def bulk_create_items(
    owner_id: str,
    rows: list[CanonicalRow],
    lookups: LookupData,
    store: ItemStore,
    default_status: str = DEFAULT_STATUS_NAME,
) -> ImportResult:
    """Create one item per validated row inside a single transaction.

    Either every row is stored or none is: any exception while resolving or
    inserting a row aborts the transaction and is re-raised.

    Args:
        owner_id: User performing the import.
        rows: Rows that passed validate_rows().
        lookups: Reference tables used during validation.
        store: Item store providing the transaction and insert operation.
        default_status: Status name used when a row's status is blank or unknown.

    Returns:
        ImportResult with the stored records.
    """
    maps = LookupMaps.from_lookup_data(lookups)
    default_entry = find_default_status(lookups.statuses, default_status)
    default_status_id = default_entry.id if default_entry else None
    if default_entry is None:
        logger.warning("Default status '%s' not found; blank statuses stay null", default_status)

    created: list[Any] = []
    async with store.transaction() as session:
        for row in rows:
            record = resolve_row(row, maps, default_status_id, owner_id)
            created.append(await store.insert_item(record, session))

    logger.info("Bulk import committed %d items for owner %s", len(created), owner_id)
    return ImportResult(imported_count=len(created), created_records=created)
