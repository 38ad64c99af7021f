"""Column header normalization and mapping for card imports."""

import logging
import re

from .constants import COLUMN_SYNONYMS

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[_\s-]+")

# Reverse index: normalized synonym -> first field (in table order) listing it
_SYNONYM_INDEX: dict[str, str] = {}
for _field, _synonyms in COLUMN_SYNONYMS.items():
    for _synonym in _synonyms:
        _SYNONYM_INDEX.setdefault(_synonym, _field)


def normalize_header(header: str | None) -> str:
    """Normalize a spreadsheet header for synonym lookup.

    Lowercases, trims, and collapses runs of underscores, hyphens and
    whitespace into a single space.

    Args:
        header: Raw header text as it appeared in the file.

    Returns:
        Normalized header, or "" for a missing header.
    """
    if not header:
        return ""
    return _SEPARATORS.sub(" ", str(header).lower().strip()).strip()


def map_column_headers(headers: list[str]) -> tuple[dict[str, str], list[str]]:
    """Map raw spreadsheet headers to canonical card fields.

    Matching is exact on the normalized header. Unknown headers are not an
    error; they are returned in the ignored list. When several headers map to
    the same field, the first one in header order keeps it and the rest are
    ignored.

    Args:
        headers: Header row, in file order.

    Returns:
        Tuple of (mapping of raw header -> field, ignored raw headers).
    """
    mapping: dict[str, str] = {}
    ignored: list[str] = []
    claimed: set[str] = set()

    for header in headers:
        normalized = normalize_header(header)
        if not normalized or header in mapping:
            continue

        field = _SYNONYM_INDEX.get(normalized)
        if field is None:
            ignored.append(header)
            continue

        if field in claimed:
            logger.debug(
                "Column '%s' also maps to '%s'; keeping the first occurrence",
                header,
                field,
            )
            ignored.append(header)
            continue

        mapping[header] = field
        claimed.add(field)

    return mapping, ignored


def get_accepted_column_names() -> dict[str, list[str]]:
    """List the accepted header variations for each card field."""
    return {field: list(synonyms) for field, synonyms in COLUMN_SYNONYMS.items()}
