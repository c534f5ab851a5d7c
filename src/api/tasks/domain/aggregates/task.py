"""Task aggregate for the Tasks context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from tasks.domain.value_objects import (
    DEFAULT_TASK_PRIORITY,
    MAX_TASK_NAME_LENGTH,
    MAX_TASK_PRIORITY_LENGTH,
    TaskId,
    TaskScope,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _validate_name(name: str) -> str:
    if not name or len(name) > MAX_TASK_NAME_LENGTH:
        raise ValueError(
            f"Task name must be between 1 and {MAX_TASK_NAME_LENGTH} characters"
        )
    return name


def _validate_priority(priority: str) -> str:
    if not priority or len(priority) > MAX_TASK_PRIORITY_LENGTH:
        raise ValueError(
            f"Task priority must be between 1 and {MAX_TASK_PRIORITY_LENGTH} characters"
        )
    return priority


@dataclass
class Task:
    """A unit of work tracked inside a tenant.

    Business rules:
    - Names are 1 to 500 characters long
    - Priority is a short label, "medium" unless set
    - A task never moves between scopes
    - updated_at changes on every accepted update
    """

    id: TaskId
    scope: TaskScope
    name: str
    done: bool
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    priority: str = DEFAULT_TASK_PRIORITY
    due_date: datetime | None = None

    @classmethod
    def create(
        cls,
        scope: TaskScope,
        name: str,
        done: bool = False,
        description: str | None = None,
        priority: str = DEFAULT_TASK_PRIORITY,
        due_date: datetime | None = None,
    ) -> Task:
        """Create a new task inside the given scope.

        Raises:
            ValueError: If the name or priority is empty or too long
        """
        now = _now()
        return cls(
            id=TaskId.generate(),
            scope=scope,
            name=_validate_name(name),
            done=done,
            created_at=now,
            updated_at=now,
            description=description,
            priority=_validate_priority(priority),
            due_date=due_date,
        )

    def apply_update(
        self,
        name: str | None = None,
        done: bool | None = None,
        description: str | None = None,
        priority: str | None = None,
        due_date: datetime | None = None,
    ) -> None:
        """Apply a partial update. Fields left as None are kept.

        Raises:
            ValueError: If no field is provided or a value is invalid
        """
        if all(
            value is None for value in (name, done, description, priority, due_date)
        ):
            raise ValueError("No updates provided")

        if name is not None:
            self.name = _validate_name(name)
        if done is not None:
            self.done = done
        if description is not None:
            self.description = description
        if priority is not None:
            self.priority = _validate_priority(priority)
        if due_date is not None:
            self.due_date = due_date
        self.updated_at = _now()
