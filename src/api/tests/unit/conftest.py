"""Unit test fixtures with mocked dependencies."""

from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.settings import DatabaseSettings, OIDCSettings, WebClientSettings


@pytest.fixture
def mock_db_settings() -> DatabaseSettings:
    """Provide test database settings."""
    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def oidc_settings() -> OIDCSettings:
    """Identity provider settings with the standard local defaults."""
    return OIDCSettings(
        url="http://localhost:8080",
        realm="contrack",
        client_id="contrackapi",
    )


@pytest.fixture
def web_settings() -> WebClientSettings:
    """Web client settings pointing at a test API with no create delay."""
    return WebClientSettings(
        api_base_url="http://api.test",
        app_origin="http://acme.tasks.example.com",
        create_delay_seconds=0,
    )


@pytest.fixture
def mock_session() -> Mock:
    """Mock AsyncSession with awaitable transaction methods."""
    session = Mock(spec=AsyncSession)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session
