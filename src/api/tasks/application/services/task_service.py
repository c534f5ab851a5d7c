"""Task application service.

Implements the task use cases for one tenant-scoped caller. Writes are
committed on the request session after the repository flushed them.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from tasks.application.observability import DefaultTaskServiceProbe, TaskServiceProbe
from tasks.domain.aggregates import Task
from tasks.domain.value_objects import DEFAULT_TASK_PRIORITY, TaskId, TaskScope
from tasks.ports.exceptions import TaskNotFoundError
from tasks.ports.repositories import ITaskRepository


class TaskService:
    """Application service for the task resource."""

    def __init__(
        self,
        task_repository: ITaskRepository,
        session: AsyncSession,
        probe: TaskServiceProbe | None = None,
    ):
        """Initialize TaskService with dependencies.

        Args:
            task_repository: Repository for task persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._task_repository = task_repository
        self._session = session
        self._probe = probe or DefaultTaskServiceProbe()

    async def list_tasks(self, scope: TaskScope) -> list[Task]:
        """List the caller's tasks in the tenant."""
        return await self._task_repository.list_in_scope(scope)

    async def get_task(self, task_id: TaskId, scope: TaskScope) -> Task:
        """Fetch one task.

        Raises:
            TaskNotFoundError: If the task is not in the caller's scope
        """
        task = await self._task_repository.get(task_id, scope)
        if task is None:
            self._probe.task_not_found(task_id.value, scope.tenant_id)
            raise TaskNotFoundError(f"Task {task_id} not found")
        return task

    async def create_task(
        self,
        scope: TaskScope,
        name: str,
        done: bool = False,
        description: str | None = None,
        priority: str = DEFAULT_TASK_PRIORITY,
        due_date: datetime | None = None,
    ) -> Task:
        """Create a task in the caller's scope.

        Raises:
            ValueError: If the name or priority is invalid
        """
        task = Task.create(
            scope=scope,
            name=name,
            done=done,
            description=description,
            priority=priority,
            due_date=due_date,
        )
        await self._task_repository.save(task)
        await self._session.commit()

        self._probe.task_created(task.id.value, scope.tenant_id, scope.user_id)
        return task

    async def update_task(
        self,
        task_id: TaskId,
        scope: TaskScope,
        name: str | None = None,
        done: bool | None = None,
        description: str | None = None,
        priority: str | None = None,
        due_date: datetime | None = None,
    ) -> Task:
        """Apply a partial update to a task.

        Raises:
            TaskNotFoundError: If the task is not in the caller's scope
            ValueError: If no field is provided or a value is invalid
        """
        changes = {
            "name": name,
            "done": done,
            "description": description,
            "priority": priority,
            "due_date": due_date,
        }
        task = await self.get_task(task_id, scope)
        task.apply_update(**changes)

        await self._task_repository.save(task)
        await self._session.commit()

        fields = [field for field, value in changes.items() if value is not None]
        self._probe.task_updated(task.id.value, fields)
        return task

    async def delete_task(self, task_id: TaskId, scope: TaskScope) -> None:
        """Delete a task.

        Raises:
            TaskNotFoundError: If the task is not in the caller's scope
        """
        deleted = await self._task_repository.delete(task_id, scope)
        if not deleted:
            self._probe.task_not_found(task_id.value, scope.tenant_id)
            raise TaskNotFoundError(f"Task {task_id} not found")

        await self._session.commit()
        self._probe.task_deleted(task_id.value)
