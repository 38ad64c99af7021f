"""MongoDB document models for CardBox."""

from cardbox.models.item import Item
from cardbox.models.lookups import Category, Condition, GradingCompany, Status

__all__ = [
    # Main documents
    "Item",
    # Reference data documents
    "Category",
    "Status",
    "GradingCompany",
    "Condition",
]
