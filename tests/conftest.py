"""Pytest configuration and fixtures for CardBox tests.

Nothing here needs a running MongoDB: the reference tables are built in
memory and the item store is replaced by an in-memory transactional fake.
"""

import io
import itertools
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook

from cardbox.services.bulk_import import LookupData, LookupEntry


class FakeSession:
    """Stands in for a Motor client session; collects rows until commit."""

    def __init__(self) -> None:
        self.staged: list[dict[str, Any]] = []


class FakeItemStore:
    """In-memory item store with all-or-nothing transactions.

    Rows inserted inside ``transaction()`` only become visible in
    ``committed`` when the block exits without an exception.
    """

    def __init__(self, fail_on: int | None = None) -> None:
        self.fail_on = fail_on
        self.committed: list[dict[str, Any]] = []
        self.transactions_opened = 0
        self.rolled_back = 0
        self._ids = itertools.count(1)
        self._inserts = 0

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[FakeSession, None]:
        self.transactions_opened += 1
        session = FakeSession()
        try:
            yield session
        except Exception:
            self.rolled_back += 1
            raise
        self.committed.extend(session.staged)

    async def insert_item(self, record: dict[str, Any], session: FakeSession) -> dict[str, Any]:
        self._inserts += 1
        if self.fail_on is not None and self._inserts == self.fail_on:
            raise RuntimeError("duplicate key error")
        stored = {"id": next(self._ids), **record}
        session.staged.append(stored)
        return stored


def make_xlsx(headers: list[str], rows: list[list]) -> bytes:
    """Build an in-memory XLSX workbook with one sheet."""
    wb = Workbook()
    ws = wb.active
    ws.append(headers)
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def make_csv(lines: list[str]) -> bytes:
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def lookups() -> LookupData:
    """Reference tables as they would be fetched for one import."""
    return LookupData(
        categories=[
            LookupEntry(id=1, name="Football"),
            LookupEntry(id=2, name="Baseball"),
            LookupEntry(id=3, name="Basketball"),
        ],
        statuses=[
            LookupEntry(id=5, name="Listed"),
            LookupEntry(id=6, name="Sold"),
            LookupEntry(id=7, name="Unlisted"),
        ],
        grading_companies=[
            LookupEntry(id=11, name="BGS"),
            LookupEntry(id=12, name="PSA"),
        ],
        conditions=[
            LookupEntry(id=21, name="Mint"),
            LookupEntry(id=22, name="Near Mint"),
        ],
    )


@pytest.fixture
def item_store() -> FakeItemStore:
    return FakeItemStore()


@pytest.fixture
def app(lookups: LookupData, item_store: FakeItemStore):
    """CardBox app with auth, lookups and storage replaced by in-memory fakes."""
    from fastapi import FastAPI

    from cardbox.main import create_app
    from cardbox.routers.bulk_upload import get_lookup_data, get_lookup_loader, limiter
    from cardbox.services.auth import require_auth
    from cardbox.services.item_store import get_item_store

    # Empty lifespan for testing - no database connection
    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        yield

    test_app = create_app(lifespan_context=test_lifespan)
    test_app.dependency_overrides[require_auth] = lambda: "user-1"
    test_app.dependency_overrides[get_lookup_data] = lambda: lookups

    async def load_lookups() -> LookupData:
        return lookups

    test_app.dependency_overrides[get_lookup_loader] = lambda: load_lookups
    test_app.dependency_overrides[get_item_store] = lambda: item_store

    limiter.reset()
    yield test_app
    test_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
