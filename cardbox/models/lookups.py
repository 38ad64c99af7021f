"""Reference (lookup) document models: categories, statuses, grading companies, conditions.

Each lookup carries a stable integer id that items reference, so imports and
exports stay readable independently of MongoDB ObjectIds.
"""

from beanie import Document, Indexed


class Category(Document):
    """Sport category (Football, Baseball, ...)."""

    lookup_id: Indexed(int, unique=True)
    name: Indexed(str)

    class Settings:
        name = "categories"

    def __repr__(self) -> str:
        return f"<Category(lookup_id={self.lookup_id}, name={self.name})>"


class Status(Document):
    """Listing status (Unlisted, Listed, Sold, ...)."""

    lookup_id: Indexed(int, unique=True)
    name: Indexed(str)

    class Settings:
        name = "statuses"

    def __repr__(self) -> str:
        return f"<Status(lookup_id={self.lookup_id}, name={self.name})>"


class GradingCompany(Document):
    """Professional grading company (PSA, BGS, SGC, ...)."""

    lookup_id: Indexed(int, unique=True)
    name: Indexed(str)

    class Settings:
        name = "grading_companies"

    def __repr__(self) -> str:
        return f"<GradingCompany(lookup_id={self.lookup_id}, name={self.name})>"


class Condition(Document):
    """Raw card condition (Mint, Near Mint, ...)."""

    lookup_id: Indexed(int, unique=True)
    name: Indexed(str)

    class Settings:
        name = "conditions"

    def __repr__(self) -> str:
        return f"<Condition(lookup_id={self.lookup_id}, name={self.name})>"
