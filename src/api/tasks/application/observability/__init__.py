"""Observability probes for the Tasks application layer."""

from tasks.application.observability.task_service_probe import (
    DefaultTaskServiceProbe,
    TaskServiceProbe,
)

__all__ = [
    "DefaultTaskServiceProbe",
    "TaskServiceProbe",
]
