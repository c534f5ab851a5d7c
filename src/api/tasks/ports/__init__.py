"""Ports (interfaces) for the Tasks bounded context."""

from tasks.ports.exceptions import TaskNotFoundError
from tasks.ports.repositories import ITaskRepository

__all__ = [
    "ITaskRepository",
    "TaskNotFoundError",
]
