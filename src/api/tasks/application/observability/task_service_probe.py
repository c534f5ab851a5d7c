"""Probe for the task application service.

Task events are tenant scoped; the request dependency binds the tenant slug
and how it was resolved as context.
"""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class TaskServiceProbe(Protocol):
    """Domain probe for task application service operations."""

    def task_created(self, task_id: str, tenant_id: str, user_id: str) -> None:
        """Record that a task was created."""
        ...

    def task_updated(self, task_id: str, fields: list[str]) -> None:
        """Record that a task was updated."""
        ...

    def task_deleted(self, task_id: str) -> None:
        """Record that a task was deleted."""
        ...

    def task_not_found(self, task_id: str, tenant_id: str) -> None:
        """Record that a task lookup missed within the caller's scope."""
        ...

    def with_context(self, context: ObservationContext) -> TaskServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTaskServiceProbe(StructlogProbe):
    """Default implementation of TaskServiceProbe using structlog."""

    def task_created(self, task_id: str, tenant_id: str, user_id: str) -> None:
        """Record that a task was created."""
        self._logger.info(
            "task_created",
            task_id=task_id,
            tenant_id=tenant_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def task_updated(self, task_id: str, fields: list[str]) -> None:
        """Record that a task was updated."""
        self._logger.info(
            "task_updated",
            task_id=task_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def task_deleted(self, task_id: str) -> None:
        """Record that a task was deleted."""
        self._logger.info(
            "task_deleted",
            task_id=task_id,
            **self._get_context_kwargs(),
        )

    def task_not_found(self, task_id: str, tenant_id: str) -> None:
        """Record that a task lookup missed within the caller's scope."""
        self._logger.debug(
            "task_not_found",
            task_id=task_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )
