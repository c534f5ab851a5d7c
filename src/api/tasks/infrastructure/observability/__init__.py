"""Domain-Oriented Observability for Tasks infrastructure."""

from tasks.infrastructure.observability.repository_probe import (
    DefaultTaskRepositoryProbe,
    TaskRepositoryProbe,
)

__all__ = [
    "DefaultTaskRepositoryProbe",
    "TaskRepositoryProbe",
]
