"""Application services for the Tasks bounded context."""

from tasks.application.services.task_service import TaskService

__all__ = [
    "TaskService",
]
