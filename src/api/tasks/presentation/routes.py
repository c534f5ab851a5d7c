"""HTTP routes for the tenant-scoped task resource."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from tasks.application.services import TaskService
from tasks.dependencies.task import get_task_scope, get_task_service
from tasks.domain.value_objects import TaskId, TaskScope
from tasks.ports.exceptions import TaskNotFoundError
from tasks.presentation.models import CreateTaskRequest, TaskResponse, UpdateTaskRequest

ULID_PATTERN = r"^[0-7][0-9A-HJKMNP-TV-Za-hjkmnp-tv-z]{25}$"

TaskIdPath = Annotated[str, Path(pattern=ULID_PATTERN, description="Task ID (ULID)")]

router = APIRouter(
    prefix="/tenants/{tenant_id}/tasks",
    tags=["tasks"],
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


@router.get("")
async def list_tasks(
    scope: Annotated[TaskScope, Depends(get_task_scope)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> list[TaskResponse]:
    """List the caller's tasks in the tenant."""
    tasks = await service.list_tasks(scope)
    return [TaskResponse.from_domain(task) for task in tasks]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    request: CreateTaskRequest,
    scope: Annotated[TaskScope, Depends(get_task_scope)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """Create a task in the tenant."""
    task = await service.create_task(scope, **request.model_dump())
    return TaskResponse.from_domain(task)


@router.get("/{task_id}")
async def get_task(
    task_id: TaskIdPath,
    scope: Annotated[TaskScope, Depends(get_task_scope)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """Fetch one task.

    Raises:
        HTTPException: 404 if the task is not in the caller's scope
    """
    try:
        task = await service.get_task(TaskId.from_string(task_id), scope)
    except TaskNotFoundError:
        raise _not_found()
    return TaskResponse.from_domain(task)


@router.patch("/{task_id}")
async def update_task(
    task_id: TaskIdPath,
    request: UpdateTaskRequest,
    scope: Annotated[TaskScope, Depends(get_task_scope)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """Apply a partial update to a task.

    Raises:
        HTTPException: 404 if the task is not in the caller's scope
    """
    try:
        task = await service.update_task(
            TaskId.from_string(task_id), scope, **request.provided_fields()
        )
    except TaskNotFoundError:
        raise _not_found()
    return TaskResponse.from_domain(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: TaskIdPath,
    scope: Annotated[TaskScope, Depends(get_task_scope)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> Response:
    """Delete a task.

    Raises:
        HTTPException: 404 if the task is not in the caller's scope
    """
    try:
        await service.delete_task(TaskId.from_string(task_id), scope)
    except TaskNotFoundError:
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
