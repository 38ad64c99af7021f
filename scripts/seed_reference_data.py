#!/usr/bin/env python3
"""Seed lookup data from reference-data.yaml into MongoDB.

This script populates the reference collections used by the bulk importer:
- categories
- statuses
- grading_companies
- conditions

Existing entries are matched on their integer id and renamed if needed.

Usage:
    uv run python -m scripts.seed_reference_data
    uv run python -m scripts.seed_reference_data --dry-run
"""

import argparse
import asyncio
from pathlib import Path

import yaml
from beanie import Document

from cardbox.database import close_db, init_db
from cardbox.models import Category, Condition, GradingCompany, Status

DATA_PATH = Path(__file__).parent.parent / "data" / "reference-data.yaml"

COLLECTIONS: dict[str, type[Document]] = {
    "categories": Category,
    "statuses": Status,
    "grading_companies": GradingCompany,
    "conditions": Condition,
}


def load_reference_data(path: Path = DATA_PATH) -> dict[str, dict[int, str]]:
    """Load the reference-data.yaml file."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return {
        key: {int(lookup_id): str(name) for lookup_id, name in (data.get(key) or {}).items()}
        for key in COLLECTIONS
    }


async def seed_collection(
    model: type[Document],
    entries: dict[int, str],
    dry_run: bool = False,
) -> int:
    """Upsert one lookup collection.

    Returns count of records inserted/updated.
    """
    count = 0
    for lookup_id, name in sorted(entries.items()):
        if dry_run:
            print(f"  [DRY RUN] Would upsert {model.__name__}: {lookup_id} - {name}")
            count += 1
            continue

        existing = await model.find_one(model.lookup_id == lookup_id)
        if existing is None:
            await model(lookup_id=lookup_id, name=name).insert()
            count += 1
        elif existing.name != name:
            existing.name = name
            await existing.save()
            count += 1
    return count


async def seed(data: dict[str, dict[int, str]], dry_run: bool = False) -> None:
    """Seed every lookup collection."""
    if not dry_run:
        await init_db()
    try:
        for key, model in COLLECTIONS.items():
            print()
            print(f"Seeding {key}...")
            processed = await seed_collection(model, data[key], dry_run)
            print(f"  Processed {processed} {key}")
    finally:
        if not dry_run:
            await close_db()


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed lookup data from reference-data.yaml",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-f", "--file",
        default=str(DATA_PATH),
        help=f"Path to reference data file (default: {DATA_PATH})",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without applying changes",
    )

    args = parser.parse_args()

    path = Path(args.file)
    if not path.exists():
        print(f"Reference data file not found at: {path}")
        return 1

    print(f"Loading reference data from: {path}")
    data = load_reference_data(path)
    asyncio.run(seed(data, args.dry_run))

    print()
    print("All reference data seeded successfully!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
