"""PostgreSQL implementation of ITaskRepository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tasks.domain.aggregates import Task
from tasks.domain.value_objects import TaskId, TaskScope
from tasks.infrastructure.models import TaskModel
from tasks.infrastructure.observability import (
    DefaultTaskRepositoryProbe,
    TaskRepositoryProbe,
)
from tasks.ports.repositories import ITaskRepository


class TaskRepository(ITaskRepository):
    """Repository managing PostgreSQL storage for Task aggregates.

    Every query filters on both tenant_id and user_id so a task is never
    visible outside the scope it was created in.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: TaskRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTaskRepositoryProbe()

    async def save(self, task: Task) -> None:
        """Insert or update the task row."""
        model = await self._get_model(task.id, task.scope)

        if model is None:
            model = TaskModel(
                id=task.id.value,
                tenant_id=task.scope.tenant_id,
                user_id=task.scope.user_id,
                created_at=task.created_at,
            )
            self._session.add(model)

        model.name = task.name
        model.done = task.done
        model.description = task.description
        model.priority = task.priority
        model.due_date = task.due_date
        model.updated_at = task.updated_at

        await self._session.flush()
        self._probe.task_saved(task.id.value, task.scope.tenant_id)

    async def get(self, task_id: TaskId, scope: TaskScope) -> Task | None:
        """Fetch a task by id within a scope."""
        model = await self._get_model(task_id, scope)
        if model is None:
            return None
        return self._to_domain(model)

    async def list_in_scope(self, scope: TaskScope) -> list[Task]:
        """Fetch every task in a scope, newest first."""
        stmt = (
            select(TaskModel)
            .where(
                TaskModel.tenant_id == scope.tenant_id,
                TaskModel.user_id == scope.user_id,
            )
            .order_by(TaskModel.created_at.desc(), TaskModel.id.desc())
        )
        result = await self._session.execute(stmt)
        tasks = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.tasks_listed(scope.tenant_id, len(tasks))
        return tasks

    async def delete(self, task_id: TaskId, scope: TaskScope) -> bool:
        """Delete a task within a scope."""
        stmt = delete(TaskModel).where(
            TaskModel.id == task_id.value,
            TaskModel.tenant_id == scope.tenant_id,
            TaskModel.user_id == scope.user_id,
        )
        result = await self._session.execute(stmt)

        if result.rowcount == 0:
            return False

        self._probe.task_deleted(task_id.value, scope.tenant_id)
        return True

    async def _get_model(self, task_id: TaskId, scope: TaskScope) -> TaskModel | None:
        stmt = select(TaskModel).where(
            TaskModel.id == task_id.value,
            TaskModel.tenant_id == scope.tenant_id,
            TaskModel.user_id == scope.user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: TaskModel) -> Task:
        return Task(
            id=TaskId(value=model.id),
            scope=TaskScope(tenant_id=model.tenant_id, user_id=model.user_id),
            name=model.name,
            done=model.done,
            created_at=model.created_at,
            updated_at=model.updated_at,
            description=model.description,
            priority=model.priority,
            due_date=model.due_date,
        )
