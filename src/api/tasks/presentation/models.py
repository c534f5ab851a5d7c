"""Pydantic models for task API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_core import PydanticCustomError

from tasks.domain.aggregates import Task
from tasks.domain.value_objects import (
    DEFAULT_TASK_PRIORITY,
    MAX_TASK_NAME_LENGTH,
    MAX_TASK_PRIORITY_LENGTH,
)


class CreateTaskRequest(BaseModel):
    """Request model for creating a task."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=MAX_TASK_NAME_LENGTH)
    done: bool = False
    description: str | None = None
    priority: str = Field(
        default=DEFAULT_TASK_PRIORITY, min_length=1, max_length=MAX_TASK_PRIORITY_LENGTH
    )
    due_date: datetime | None = Field(default=None, alias="dueDate")


class UpdateTaskRequest(BaseModel):
    """Request model for a partial task update.

    At least one field must be present.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1, max_length=MAX_TASK_NAME_LENGTH)
    done: bool | None = None
    description: str | None = None
    priority: str | None = Field(
        default=None, min_length=1, max_length=MAX_TASK_PRIORITY_LENGTH
    )
    due_date: datetime | None = Field(default=None, alias="dueDate")

    @model_validator(mode="after")
    def _require_some_update(self) -> UpdateTaskRequest:
        if not self.provided_fields():
            raise PydanticCustomError("invalid_updates", "No updates provided")
        return self

    def provided_fields(self) -> dict[str, Any]:
        """Fields the client actually sent with a non-null value."""
        return self.model_dump(exclude_none=True)


class TaskResponse(BaseModel):
    """Response model for a task."""

    id: str
    name: str
    done: bool
    description: str | None
    priority: str
    due_date: datetime | None = Field(..., serialization_alias="dueDate")
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")

    @classmethod
    def from_domain(cls, task: Task) -> TaskResponse:
        """Convert domain Task aggregate to API response."""
        return cls(
            id=task.id.value,
            name=task.name,
            done=task.done,
            description=task.description,
            priority=task.priority,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
