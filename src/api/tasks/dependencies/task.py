"""FastAPI dependencies for task routes."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.dependencies.tenant_context import get_tenant_context
from infrastructure.database.dependencies import get_session
from shared_kernel.middleware.tenant_context import TenantContext
from shared_kernel.observability_context import ObservationContext
from tasks.application.observability import DefaultTaskServiceProbe, TaskServiceProbe
from tasks.application.services import TaskService
from tasks.domain.value_objects import TaskScope
from tasks.infrastructure.task_repository import TaskRepository


def get_task_scope(
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
) -> TaskScope:
    """Derive the task scope from the resolved tenant context."""
    return TaskScope(tenant_id=tenant.tenant_id, user_id=tenant.user_id)


def get_task_service_probe(
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
) -> TaskServiceProbe:
    """Get a TaskServiceProbe tagged with how the request addressed its tenant.

    Tenant and user ids are passed by the service on each event.
    """
    context = ObservationContext(
        extra={"tenant_slug": tenant.slug, "tenant_source": tenant.source}
    )
    return DefaultTaskServiceProbe().with_context(context)


def get_task_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TaskRepository:
    """Get TaskRepository instance bound to the request session."""
    return TaskRepository(session=session)


def get_task_service(
    task_repo: Annotated[TaskRepository, Depends(get_task_repository)],
    session: Annotated[AsyncSession, Depends(get_session)],
    probe: Annotated[TaskServiceProbe, Depends(get_task_service_probe)],
) -> TaskService:
    """Get TaskService instance.

    Args:
        task_repo: Task repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        probe: Task service probe for observability

    Returns:
        TaskService instance
    """
    return TaskService(task_repository=task_repo, session=session, probe=probe)
