"""MongoDB database setup and Beanie ODM initialization."""

from typing import TYPE_CHECKING

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from cardbox.config import settings

if TYPE_CHECKING:
    from beanie import Document

# Global database client reference
client: AsyncIOMotorClient | None = None


def get_document_models() -> list[type["Document"]]:
    """Get all Beanie document models for initialization."""
    from cardbox.models import Category, Condition, GradingCompany, Item, Status

    return [
        Item,
        Category,
        Status,
        GradingCompany,
        Condition,
    ]


async def init_db(
    mongodb_url: str | None = None,
    mongodb_database: str | None = None,
    motor_client: AsyncIOMotorClient | None = None,
) -> None:
    """Initialize the MongoDB database connection and Beanie ODM.

    Args:
        mongodb_url: Optional MongoDB connection URL. Defaults to settings.
        mongodb_database: Optional database name. Defaults to settings.
        motor_client: Optional pre-configured motor client (for testing).
    """
    global client

    if motor_client is not None:
        client = motor_client
    else:
        url = mongodb_url or settings.mongodb_url
        client = AsyncIOMotorClient(
            url,
            minPoolSize=settings.min_pool_size,
            maxPoolSize=settings.max_pool_size,
        )

    db_name = mongodb_database or settings.mongodb_database
    database = client[db_name]

    await init_beanie(
        database=database,
        document_models=get_document_models(),
    )


async def close_db() -> None:
    """Close the MongoDB database connection."""
    global client

    if client is not None:
        client.close()
        client = None


def get_client() -> AsyncIOMotorClient:
    """Get the current Motor client (needed to start transaction sessions).

    Raises:
        RuntimeError: If database is not initialized.
    """
    if client is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return client

