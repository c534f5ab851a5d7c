"""Task reads and writes for the client session layer."""

from webclient.tasks.mutations import (
    TaskMutations,
    create_task,
    delete_task,
    update_task,
)
from webclient.tasks.queries import (
    QueryKey,
    query_keys,
    task_query_options,
    tasks_query_options,
)

__all__ = [
    "QueryKey",
    "TaskMutations",
    "create_task",
    "delete_task",
    "query_keys",
    "task_query_options",
    "tasks_query_options",
    "update_task",
]
