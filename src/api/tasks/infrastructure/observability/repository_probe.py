"""Domain probe for task repository operations."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class TaskRepositoryProbe(Protocol):
    """Domain probe for task repository operations."""

    def task_saved(self, task_id: str, tenant_id: str) -> None:
        """Record that a task was persisted."""
        ...

    def task_deleted(self, task_id: str, tenant_id: str) -> None:
        """Record that a task row was deleted."""
        ...

    def tasks_listed(self, tenant_id: str, count: int) -> None:
        """Record that the tasks of a scope were listed."""
        ...

    def with_context(self, context: ObservationContext) -> TaskRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTaskRepositoryProbe(StructlogProbe):
    """Default implementation of TaskRepositoryProbe using structlog."""

    def task_saved(self, task_id: str, tenant_id: str) -> None:
        self._logger.debug(
            "task_saved",
            task_id=task_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def task_deleted(self, task_id: str, tenant_id: str) -> None:
        self._logger.debug(
            "task_deleted",
            task_id=task_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tasks_listed(self, tenant_id: str, count: int) -> None:
        self._logger.debug(
            "tasks_listed",
            tenant_id=tenant_id,
            count=count,
            **self._get_context_kwargs(),
        )
