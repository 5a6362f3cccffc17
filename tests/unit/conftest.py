"""Pytest configuration for unit tests."""

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from postcollections.infrastructure.persistence.database import Base
from postcollections.infrastructure.persistence import models  # noqa: F401


@pytest.fixture
def unique_checker() -> MagicMock:
    """Slug uniqueness checker that accepts every slug."""
    checker = MagicMock()
    checker.is_unique_slug = AsyncMock(return_value=True)
    return checker


@pytest.fixture
def taken_checker() -> MagicMock:
    """Slug uniqueness checker that rejects every slug."""
    checker = MagicMock()
    checker.is_unique_slug = AsyncMock(return_value=False)
    return checker


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
