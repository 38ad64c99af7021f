"""Constants for the card bulk import service."""

from types import MappingProxyType

# Maximum rows read from one spreadsheet (uploads are capped at 10 MB upstream)
MAX_ROWS = 5000

# Canonical field -> accepted header synonyms (already normalized).
# Iteration order is the matching order: the first field listing a header wins.
COLUMN_SYNONYMS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "title": ("title", "card title", "name", "card name"),
    "category": ("category", "sport", "sport category", "category name"),
    "status": ("status", "listing status", "card status"),
    "player_name": ("player", "player name", "playername", "athlete"),
    "team_name": ("team", "team name", "teamname"),
    "year": ("year", "card year", "yr", "season"),
    "brand": ("brand", "manufacturer", "make"),
    "sub_brand": ("sub brand", "subbrand", "set", "subset"),
    "rookie": ("rookie", "rc", "rookie card"),
    "autograph": ("autograph", "auto", "signed", "au", "signature"),
    "numbered_to": ("numbered to", "numbered", "#'d to", "/99", "serial"),
    "patch_count": ("patch count", "patches", "patch"),
    "grading_company": ("grading company", "grader", "grade co", "grade company"),
    "grade_value": ("grade value", "grade", "numeric grade"),
    "condition": ("condition", "card condition"),
    "market_value": ("market value", "value", "worth", "price"),
    "price_listed": ("price listed", "list price", "asking price"),
    "date_listed": ("date listed", "listed date", "list date"),
    "date_sold": ("date sold", "sold date", "sale date"),
    "ebay_url": ("ebay url", "ebay link", "url", "link"),
    "tags": ("tags", "keywords", "labels"),
})

CANONICAL_FIELDS: tuple[str, ...] = tuple(COLUMN_SYNONYMS)

# Per-field coercion groups
BOOLEAN_FIELDS = frozenset({"rookie", "autograph"})
INTEGER_FIELDS = frozenset({"year", "numbered_to", "patch_count"})
DECIMAL_FIELDS = frozenset({"market_value", "price_listed", "grade_value"})
DATE_FIELDS = frozenset({"date_listed", "date_sold"})
# Stored as strings even when the spreadsheet cell holds a number
TEXT_FIELDS = frozenset({"title", "player_name", "team_name", "brand", "sub_brand", "ebay_url"})

TRUE_STRINGS = frozenset({"y", "yes", "true", "1"})
FALSE_STRINGS = frozenset({"n", "no", "false", "0", ""})

# Validation bounds (inclusive)
MIN_YEAR = 1900
MAX_YEAR = 2025
MIN_GRADE = 0
MAX_GRADE = 10

DEFAULT_STATUS_NAME = "Unlisted"

# Accepted upload types
ALLOWED_EXTENSIONS = {"csv", "xlsx", "xls"}
ALLOWED_MIME_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/vnd.ms-excel": "xls",
    "text/csv": "csv",
}

# Column headers used by the downloadable template, in field order
TEMPLATE_HEADERS: dict[str, str] = {
    "title": "Title",
    "category": "Category",
    "status": "Status",
    "player_name": "Player Name",
    "team_name": "Team Name",
    "year": "Year",
    "brand": "Brand",
    "sub_brand": "Sub Brand",
    "rookie": "Rookie",
    "autograph": "Autograph",
    "numbered_to": "Numbered To",
    "patch_count": "Patch Count",
    "grading_company": "Grading Company",
    "grade_value": "Grade Value",
    "condition": "Condition",
    "market_value": "Market Value",
    "price_listed": "Price Listed",
    "date_listed": "Date Listed",
    "date_sold": "Date Sold",
    "ebay_url": "eBay URL",
    "tags": "Tags",
}
