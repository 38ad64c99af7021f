"""Transactional item persistence for MongoDB."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession

from cardbox.database import get_client
from cardbox.models.item import Item

logger = logging.getLogger(__name__)


class ItemStore:
    """Inserts Item documents inside a MongoDB multi-document transaction.

    Usage::

        async with store.transaction() as session:
            await store.insert_item(record, session)

    Leaving the block normally commits; an exception aborts the transaction
    and propagates.
    """

    def __init__(self, motor_client: AsyncIOMotorClient | None = None):
        self._client = motor_client

    @property
    def client(self) -> AsyncIOMotorClient:
        return self._client or get_client()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncIOMotorClientSession]:
        """Open a session and transaction scoped to the block."""
        async with await self.client.start_session() as session:
            async with session.start_transaction():
                yield session

    async def insert_item(
        self,
        record: dict[str, Any],
        session: AsyncIOMotorClientSession | None = None,
    ) -> Item:
        """Insert one fully-resolved item record and return the stored document."""
        item = Item(**record)
        await item.insert(session=session)
        logger.debug("Inserted item %s for owner %s", item.id, item.owner_id)
        return item


def get_item_store() -> ItemStore:
    """FastAPI dependency returning the item store bound to the global client."""
    return ItemStore()
