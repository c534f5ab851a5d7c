"""Domain aggregates for the Tasks context."""

from tasks.domain.aggregates.task import Task

__all__ = [
    "Task",
]
