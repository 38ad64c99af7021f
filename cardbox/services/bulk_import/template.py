"""Downloadable XLSX template for card bulk imports."""

import io

from openpyxl import Workbook
from openpyxl.styles import Font

from .constants import DEFAULT_STATUS_NAME, TEMPLATE_HEADERS
from .lookups import LookupData

TEMPLATE_FILENAME = "CardBox_Import_Template.xlsx"

EXAMPLE_ROW: dict[str, object] = {
    "title": "2020 Panini Prizm Patrick Mahomes Silver",
    "category": "Football",
    "status": "Unlisted",
    "player_name": "Patrick Mahomes",
    "team_name": "Kansas City Chiefs",
    "year": 2020,
    "brand": "Panini",
    "sub_brand": "Prizm Silver",
    "rookie": "No",
    "autograph": "No",
    "grading_company": "PSA",
    "grade_value": 10,
    "condition": "Mint",
    "market_value": 1500.00,
    "tags": "QB,Chiefs,Prizm",
}


def _instructions(lookups: LookupData, default_status: str) -> list[str]:
    def names(entries) -> str:
        return ", ".join(e.name for e in entries) or "(none configured)"

    return [
        "BULK IMPORT INSTRUCTIONS",
        "",
        "REQUIRED FIELDS:",
        "- Title (card title/description)",
        "- Category (sport type)",
        "",
        "OPTIONAL FIELDS:",
        "All other fields are optional and can be left blank",
        "",
        "VALID VALUES:",
        "",
        "Categories:",
        names(lookups.categories),
        "",
        "Statuses:",
        names(lookups.statuses),
        f'(Defaults to "{default_status}" if not provided or not recognised)',
        "",
        "Grading Companies:",
        names(lookups.grading_companies),
        "(Unrecognised values are left blank)",
        "",
        "Conditions:",
        names(lookups.conditions),
        "(Unrecognised values are left blank)",
        "",
        "BOOLEAN FIELDS (Rookie, Autograph):",
        "Accepted values: Y, N, Yes, No, True, False, 1, 0",
        'Leave blank for "No"',
        "",
        "DATE FORMATS:",
        "YYYY-MM-DD (e.g., 2024-01-15)",
        "OR MM/DD/YYYY (e.g., 01/15/2024)",
        "",
        "TAGS:",
        "Comma-separated values (e.g., QB,Chiefs,Prizm)",
        "",
        "COLUMN NAMES:",
        "Column headers are flexible and case-insensitive",
        'Examples: "Player Name" = "Player" = "PLAYER" = "athlete"',
        "Unknown columns will be ignored without error",
        "",
        "NOTES:",
        "- All cards are imported in a single transaction",
        "- If any row fails validation, the entire import is rejected",
        "- Fix all errors and re-upload the file",
        "- Images are not supported in bulk import (add individually later)",
    ]


def build_import_template(
    lookups: LookupData,
    default_status: str = DEFAULT_STATUS_NAME,
) -> bytes:
    """Build the import template workbook.

    The first sheet holds the column headers and one example row; the second
    lists the rules and the currently valid lookup values.

    Returns:
        XLSX file bytes.
    """
    wb = Workbook()

    data_sheet = wb.active
    data_sheet.title = "Card Data"
    data_sheet.append(list(TEMPLATE_HEADERS.values()))
    data_sheet.append([EXAMPLE_ROW.get(field, "") for field in TEMPLATE_HEADERS])
    for cell in data_sheet[1]:
        cell.font = Font(bold=True)

    instructions_sheet = wb.create_sheet("Instructions")
    for line in _instructions(lookups, default_status):
        instructions_sheet.append([line])
    instructions_sheet["A1"].font = Font(bold=True)

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
