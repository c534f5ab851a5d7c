"""Repository protocols (ports) for the Tasks bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tasks.domain.aggregates import Task
from tasks.domain.value_objects import TaskId, TaskScope


@runtime_checkable
class ITaskRepository(Protocol):
    """Repository for Task aggregate persistence.

    Every method is scoped: a task is only reachable from the scope it was
    created in.
    """

    async def save(self, task: Task) -> None:
        """Persist a new or updated task."""
        ...

    async def get(self, task_id: TaskId, scope: TaskScope) -> Task | None:
        """Retrieve a task by id within a scope, or None if not found."""
        ...

    async def list_in_scope(self, scope: TaskScope) -> list[Task]:
        """List all tasks in a scope, oldest first."""
        ...

    async def delete(self, task_id: TaskId, scope: TaskScope) -> bool:
        """Delete a task within a scope.

        Returns:
            True if deleted, False if not found
        """
        ...
