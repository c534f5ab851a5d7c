"""Task writes and the cache bookkeeping around them.

Writes decide success by HTTP status first (200 for update, 204 for
delete); bodies are only inspected to pick between the two error shapes.
Create has no reliable success status in the API contract, so its body is
checked for the validation shape instead.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from infrastructure.settings import get_web_client_settings
from webclient.api_client import TasksApiClient
from webclient.errors import (
    ValidationErrorBody,
    decode_body,
    error_from_body,
)
from webclient.observability import DefaultQueryCacheProbe, QueryCacheProbe
from webclient.query_client import QueryClient
from webclient.tasks.queries import _json_or_none, query_keys


def _error_from_response(response: httpx.Response):
    return error_from_body(_json_or_none(response), status_code=response.status_code)


async def create_task(
    api: TasksApiClient,
    tenant_id: str,
    payload: dict[str, Any],
    delay: float | None = None,
) -> Any:
    """Create a task after an optional pause.

    Args:
        api: API client
        tenant_id: Tenant to create the task in
        payload: ``{"name": str}`` plus optional done, description,
            priority and dueDate
        delay: Seconds to wait before sending; defaults to
            TASKS_WEB_CREATE_DELAY_SECONDS, 0 disables it

    Returns:
        The created task body

    Raises:
        ApiError: For a validation body, or for any body on an error status
    """
    if delay is None:
        delay = get_web_client_settings().create_delay_seconds
    if delay > 0:
        await asyncio.sleep(delay)

    response = await api.create_task(tenant_id, payload)
    body = _json_or_none(response)

    if isinstance(decode_body(body), ValidationErrorBody) or response.is_error:
        raise error_from_body(body, status_code=response.status_code)
    return body


async def update_task(
    api: TasksApiClient,
    *,
    tenant_id: str,
    task_id: str,
    payload: dict[str, Any],
) -> Any:
    """Partially update a task. Success is status 200.

    Returns:
        The updated task body

    Raises:
        ApiError: On any other status
    """
    response = await api.patch_task(tenant_id, task_id, payload)
    if response.status_code != 200:
        raise _error_from_response(response)
    return response.json()


async def delete_task(api: TasksApiClient, tenant_id: str, task_id: str) -> None:
    """Delete a task. Success is status 204.

    Raises:
        ApiError: On any other status
    """
    response = await api.delete_task(tenant_id, task_id)
    if response.status_code != 204:
        raise _error_from_response(response)


class TaskMutations:
    """Task writes bound to an API client and a query cache.

    After each write the affected keys are invalidated so readers refetch.
    """

    def __init__(
        self,
        api: TasksApiClient,
        query_client: QueryClient,
        create_delay: float | None = None,
        probe: QueryCacheProbe | None = None,
    ):
        self._api = api
        self._query_client = query_client
        self._create_delay = create_delay
        self._probe = probe or DefaultQueryCacheProbe()

    async def create(self, tenant_id: str, payload: dict[str, Any]) -> Any:
        """Create a task and invalidate the tenant's list."""
        task = await create_task(self._api, tenant_id, payload, delay=self._create_delay)
        await self._query_client.invalidate_queries(query_keys.list_tasks(tenant_id))
        return task

    async def update(
        self, tenant_id: str, task_id: str, payload: dict[str, Any]
    ) -> Any:
        """Update a task with an optimistic cache patch.

        The cached list and item are patched before the request. On failure
        both are restored and the error is re-raised. Either way the list
        and item keys are invalidated afterwards.
        """
        list_key = query_keys.list_tasks(tenant_id)
        item_key = query_keys.list_task(tenant_id, task_id)

        previous_list = self._query_client.get_query_data(list_key)
        previous_item = self._query_client.get_query_data(item_key)

        if isinstance(previous_list, list):
            self._query_client.set_query_data(
                list_key,
                [
                    {**t, **payload}
                    if isinstance(t, dict) and t.get("id") == task_id
                    else t
                    for t in previous_list
                ],
            )
        if isinstance(previous_item, dict):
            self._query_client.set_query_data(item_key, {**previous_item, **payload})

        try:
            return await update_task(
                self._api, tenant_id=tenant_id, task_id=task_id, payload=payload
            )
        except Exception as e:
            if previous_list is not None:
                self._query_client.set_query_data(list_key, previous_list)
            if previous_item is not None:
                self._query_client.set_query_data(item_key, previous_item)
            self._probe.mutation_rolled_back(str(item_key), str(e))
            raise
        finally:
            await self._query_client.invalidate_queries(list_key)
            await self._query_client.invalidate_queries(item_key)

    async def delete(self, tenant_id: str, task_id: str) -> None:
        """Delete a task, invalidate the list and drop the item entry."""
        await delete_task(self._api, tenant_id, task_id)
        self._query_client.remove_queries(query_keys.list_task(tenant_id, task_id))
        await self._query_client.invalidate_queries(query_keys.list_tasks(tenant_id))
