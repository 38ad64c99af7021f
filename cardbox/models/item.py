"""Item document model for MongoDB (one sports card in a collection)."""

from datetime import datetime, timezone
from typing import Optional

from beanie import Document, Indexed
from pydantic import Field


class Item(Document):
    """Item document model representing a card owned by a user."""

    # Owner reference for data isolation
    owner_id: Indexed(str)

    title: Indexed(str)

    # Lookup references (integer ids of the reference collections)
    category_id: Indexed(int)
    status_id: Optional[int] = None
    grading_company_id: Optional[int] = None
    condition_id: Optional[int] = None

    # Card attributes
    player_name: Optional[Indexed(str)] = None
    team_name: Optional[str] = None
    year: Optional[int] = None
    brand: Optional[str] = None
    sub_brand: Optional[str] = None
    rookie: bool = False
    autograph: bool = False
    numbered_to: Optional[int] = None
    patch_count: Optional[int] = None
    grade_value: Optional[float] = None

    # Pricing and listing
    market_value: Optional[float] = None
    price_listed: Optional[float] = None
    date_listed: Optional[datetime] = None
    date_sold: Optional[datetime] = None
    ebay_url: Optional[str] = None

    tags: Optional[list[str]] = None
    image_url: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "items"
        indexes = [
            "owner_id",
            "title",
            "category_id",
            "player_name",
            [("owner_id", 1), ("category_id", 1)],
        ]

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, title={self.title}, year={self.year})>"
