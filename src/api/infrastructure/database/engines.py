"""Async SQLAlchemy engine for the tasks database (asyncpg driver)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "build_async_url",
    "create_engine",
]

DRIVER = "postgresql+asyncpg"


def build_async_url(settings: DatabaseSettings, hide_password: bool = False) -> str:
    """Render the asyncpg URL for ``settings``.

    Credentials are percent-encoded by SQLAlchemy, so passwords containing
    ``@`` or ``/`` survive. Pass ``hide_password=True`` for a loggable form.
    """
    url = URL.create(
        drivername=DRIVER,
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )
    return url.render_as_string(hide_password=hide_password)


def create_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the engine shared by the tenant and task repositories.

    The pool is capped at ``pool_max_connections`` with no overflow, and
    connections are pinged before checkout.
    """
    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_max_connections,
        max_overflow=0,
        pool_pre_ping=True,
    )
