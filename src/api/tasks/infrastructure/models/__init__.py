"""SQLAlchemy ORM models for the Tasks bounded context."""

from tasks.infrastructure.models.task import TaskModel

__all__ = [
    "TaskModel",
]
