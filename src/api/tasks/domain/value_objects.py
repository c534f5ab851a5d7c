"""Value objects for the Tasks domain."""

from __future__ import annotations

from dataclasses import dataclass

from ulid import ULID

MAX_TASK_NAME_LENGTH = 500
MAX_TASK_PRIORITY_LENGTH = 20
DEFAULT_TASK_PRIORITY = "medium"


@dataclass(frozen=True)
class TaskId:
    """Identifier for a Task aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TaskId:
        """Generate a new TaskId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TaskId:
        """Create TaskId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            parsed = ULID.from_str(value.upper())
        except ValueError as e:
            raise ValueError(f"Invalid TaskId: {value}") from e

        return cls(value=str(parsed))


@dataclass(frozen=True)
class TaskScope:
    """The tenant and owner a task is visible to.

    Every read and write of a task happens inside exactly one scope.
    """

    tenant_id: str
    user_id: str
