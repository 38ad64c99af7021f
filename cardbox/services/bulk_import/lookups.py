"""Lookup tables (categories, statuses, grading companies, conditions) used to resolve names to ids."""

import logging

from pydantic import BaseModel, Field

from .constants import DEFAULT_STATUS_NAME

logger = logging.getLogger(__name__)


class LookupEntry(BaseModel):
    """One named reference value."""

    id: int
    name: str


class LookupData(BaseModel):
    """The four reference tables, already fetched from storage, in display order."""

    categories: list[LookupEntry] = Field(default_factory=list)
    statuses: list[LookupEntry] = Field(default_factory=list)
    grading_companies: list[LookupEntry] = Field(default_factory=list)
    conditions: list[LookupEntry] = Field(default_factory=list)


class LookupMaps(BaseModel):
    """Case-insensitive name maps derived from LookupData for a single import."""

    categories: dict[str, LookupEntry]
    statuses: dict[str, LookupEntry]
    grading_companies: dict[str, LookupEntry]
    conditions: dict[str, LookupEntry]

    @classmethod
    def from_lookup_data(cls, lookups: LookupData) -> "LookupMaps":
        return cls(
            categories=build_lookup_map(lookups.categories),
            statuses=build_lookup_map(lookups.statuses),
            grading_companies=build_lookup_map(lookups.grading_companies),
            conditions=build_lookup_map(lookups.conditions),
        )


def lookup_key(name: object) -> str:
    """Key used for case-insensitive name matching."""
    return str(name).lower()


def build_lookup_map(entries: list[LookupEntry]) -> dict[str, LookupEntry]:
    """Build a lowercased-name -> entry map.

    If two entries share a lowercased name, the later entry wins.
    """
    lookup_map: dict[str, LookupEntry] = {}
    for entry in entries:
        key = lookup_key(entry.name)
        if key in lookup_map:
            logger.debug(
                "Lookup name '%s' (id %s) shadows id %s",
                entry.name,
                entry.id,
                lookup_map[key].id,
            )
        lookup_map[key] = entry
    return lookup_map


def find_default_status(
    statuses: list[LookupEntry],
    name: str = DEFAULT_STATUS_NAME,
) -> LookupEntry | None:
    """Find the status used when a row gives none (case-insensitive name match)."""
    wanted = lookup_key(name)
    for status in statuses:
        if lookup_key(status.name) == wanted:
            return status
    return None


async def load_lookup_data() -> LookupData:
    """Fetch the four reference tables from MongoDB.

    Categories and grading companies are ordered by name, statuses and
    conditions by id.
    """
    from cardbox.models import Category, Condition, GradingCompany, Status

    categories = await Category.find_all().sort(Category.name).to_list()
    statuses = await Status.find_all().sort(Status.lookup_id).to_list()
    grading_companies = await GradingCompany.find_all().sort(GradingCompany.name).to_list()
    conditions = await Condition.find_all().sort(Condition.lookup_id).to_list()

    return LookupData(
        categories=[LookupEntry(id=c.lookup_id, name=c.name) for c in categories],
        statuses=[LookupEntry(id=s.lookup_id, name=s.name) for s in statuses],
        grading_companies=[
            LookupEntry(id=g.lookup_id, name=g.name) for g in grading_companies
        ],
        conditions=[LookupEntry(id=c.lookup_id, name=c.name) for c in conditions],
    )
