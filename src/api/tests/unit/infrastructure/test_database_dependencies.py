"""Unit tests for database dependency injection.

Tests the FastAPI dependency providers for async database sessions.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database import dependencies
from infrastructure.database.dependencies import (
    close_database_connections,
    create_schema,
    get_engine,
    get_session,
)


@pytest.fixture(autouse=True)
async def reset_engine():
    """Dispose the singleton engine around each test."""
    await close_database_connections()
    yield
    await close_database_connections()


@pytest.mark.asyncio
async def test_get_engine_is_singleton():
    """The engine is created once and reused."""
    engine = get_engine()

    assert isinstance(engine, AsyncEngine)
    assert engine is get_engine()


@pytest.mark.asyncio
async def test_get_session_yields_session():
    """get_session yields an AsyncSession bound to the engine."""
    async for session in get_session():
        assert isinstance(session, AsyncSession)
        assert session.bind is get_engine()


@pytest.mark.asyncio
async def test_close_resets_engine():
    """After closing, a fresh engine is created on demand."""
    first = get_engine()

    await close_database_connections()

    assert dependencies._engine is None
    assert get_engine() is not first


@pytest.mark.asyncio
async def test_create_schema_runs_create_all():
    """Missing tables are created through the metadata."""
    connection = MagicMock()
    connection.run_sync = AsyncMock()
    begin = MagicMock()
    begin.__aenter__ = AsyncMock(return_value=connection)
    begin.__aexit__ = AsyncMock(return_value=False)
    engine = MagicMock()
    engine.begin.return_value = begin

    with patch.object(dependencies, "get_engine", return_value=engine):
        await create_schema()

    connection.run_sync.assert_awaited_once_with(dependencies.Base.metadata.create_all)
