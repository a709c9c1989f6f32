"""Shared pytest fixtures for pantry store tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pantry_store.db import create_engine, migrate
from pantry_store.storage import Storage, init_storage

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """URL of a fresh SQLite file for this test."""
    return sqlite_url(tmp_path / "pantry.sqlite3")


@pytest.fixture
async def test_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create a migrated engine on a per-test SQLite file."""
    engine = create_engine(database_url)
    await migrate(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(
    test_engine: AsyncEngine,
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session whose transaction is rolled back after the test."""
    async_session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_factory() as session:
        async with session.begin():
            yield session
            # Rollback to ensure test isolation
            await session.rollback()


@pytest.fixture
async def storage(database_url: str) -> AsyncGenerator[Storage, None]:
    """An initialized Storage on a per-test SQLite file."""
    storage = await init_storage(database_url)

    yield storage

    await storage.close()


MakeCabal = Callable[..., bytes]


@pytest.fixture
def make_cabal() -> MakeCabal:
    """Factory fixture for cabal file contents."""

    def _make(name: str = "foo", version: str = "1.0", *, revision: int = 0) -> bytes:
        lines = [
            "cabal-version: 2.4",
            f"name: {name}",
            f"version: {version}",
        ]
        if revision:
            lines.insert(0, f"x-revision: {revision}")
        return ("\n".join(lines) + "\n").encode("utf-8")

    return _make
