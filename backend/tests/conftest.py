from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from leave_engine.calculators.rules import RuleRegistry, build_default_registry
from leave_engine.db import get_session
from leave_engine.main import app
from leave_engine.models import SQLModel
from leave_engine.services.records import InMemoryRecordStore, set_record_store
from leave_engine.services.rules import set_rule_registry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create a fresh in-memory SQLite database for each test.

    StaticPool keeps the single connection alive so every session sees the
    same in-memory database.
    """
    _engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a session; services commit through it."""
    session = AsyncSession(bind=engine, expire_on_commit=False)
    yield session
    await session.close()


@pytest.fixture
def record_store() -> Iterator[InMemoryRecordStore]:
    """Install an empty in-memory record store for the test."""
    store = InMemoryRecordStore()
    set_record_store(store)
    yield store
    set_record_store(InMemoryRecordStore())


@pytest.fixture
def registry() -> Iterator[RuleRegistry]:
    """Install the built-in rules for the test."""
    rules = build_default_registry()
    set_rule_registry(rules)
    yield rules
    set_rule_registry(None)


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
