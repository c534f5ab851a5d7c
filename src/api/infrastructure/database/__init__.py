"""Database infrastructure - async engines, sessions and the ORM base."""

from infrastructure.database.engines import build_async_url
from infrastructure.database.models import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
    "build_async_url",
]
