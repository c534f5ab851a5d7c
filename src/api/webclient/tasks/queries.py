"""Cache keys and query options for tenant-scoped task reads.

Keys pair a resource tag with the tenant id, so results of different
tenants never share an entry:

* list:  ``("list-tasks", tenant_id)``
* item:  ``("list-task-<id>", tenant_id)``
"""

from __future__ import annotations

from typing import Any

import httpx

from webclient.api_client import TasksApiClient
from webclient.errors import SuccessBody, decode_body, error_from_body
from webclient.query_client import QueryKey, QueryOptions


class _QueryKeys:
    """Factory for task cache keys."""

    @staticmethod
    def list_tasks(tenant_id: str) -> QueryKey:
        return QueryKey(("list-tasks", tenant_id))

    @staticmethod
    def list_task(tenant_id: str, task_id: str) -> QueryKey:
        return QueryKey((f"list-task-{task_id}", tenant_id))


query_keys = _QueryKeys()


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def tasks_query_options(api: TasksApiClient, tenant_id: str) -> QueryOptions[Any]:
    """Options reading a tenant's task list.

    The body is returned as parsed. Without an authenticated session the
    result is an empty list and no request is made.
    """

    async def fetch() -> Any:
        if not api.authenticated:
            return []
        response = await api.list_tasks(tenant_id)
        return response.json()

    return QueryOptions(key=query_keys.list_tasks(tenant_id), fetch=fetch)


def task_query_options(
    api: TasksApiClient, tenant_id: str, task_id: str
) -> QueryOptions[Any]:
    """Options reading one task.

    A body with ``message`` is raised verbatim, a body with ``success`` is
    formatted and raised; any other body is the task.

    Raises:
        ApiError: From the fetch function, for either error body
    """

    async def fetch() -> Any:
        response = await api.get_task(tenant_id, task_id)
        body = _json_or_none(response)
        decoded = decode_body(body)
        if isinstance(decoded, SuccessBody):
            return decoded.data
        raise error_from_body(body, status_code=response.status_code)

    return QueryOptions(key=query_keys.list_task(tenant_id, task_id), fetch=fetch)
