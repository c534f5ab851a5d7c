"""Authenticated HTTP client for the Tasks API.

Every request carries ``Authorization: Bearer <token>`` while the auth
session holds an access token. Methods return the raw ``httpx.Response``;
interpreting bodies is left to the query and mutation layers.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from infrastructure.settings import get_web_client_settings

if TYPE_CHECKING:
    from webclient.auth.session import AuthSession


class BearerAuth(httpx.Auth):
    """httpx auth flow reading the current access token from the session."""

    def __init__(self, session: AuthSession | None):
        self._session = session

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        token = self._session.token if self._session is not None else None
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        yield request


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class TasksApiClient:
    """Thin async client over the tenant-scoped REST API.

    Transport errors (``httpx.HTTPError``) propagate unmodified; there are
    no retries.
    """

    def __init__(
        self,
        session: AuthSession | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Create the client.

        Args:
            session: Auth session supplying the access token. Without one,
                requests are sent anonymously.
            base_url: API root; defaults to TASKS_WEB_API_BASE_URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        settings = get_web_client_settings()
        self._session = session
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            auth=BearerAuth(session),
            timeout=timeout if timeout is not None else settings.request_timeout_seconds,
            transport=transport,
        )

    @property
    def authenticated(self) -> bool:
        """Whether the underlying session is authenticated."""
        return self._session is not None and self._session.authenticated

    async def __aenter__(self) -> TasksApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._http.aclose()

    async def list_tenants(self) -> httpx.Response:
        """GET /tenants"""
        return await self._http.get("/tenants")

    async def list_tasks(self, tenant_id: str) -> httpx.Response:
        """GET /tenants/{tenant_id}/tasks"""
        return await self._http.get(f"/tenants/{_segment(tenant_id)}/tasks")

    async def get_task(self, tenant_id: str, task_id: str) -> httpx.Response:
        """GET /tenants/{tenant_id}/tasks/{task_id}"""
        return await self._http.get(
            f"/tenants/{_segment(tenant_id)}/tasks/{_segment(task_id)}"
        )

    async def create_task(
        self, tenant_id: str, payload: dict[str, Any]
    ) -> httpx.Response:
        """POST /tenants/{tenant_id}/tasks"""
        return await self._http.post(
            f"/tenants/{_segment(tenant_id)}/tasks", json=payload
        )

    async def patch_task(
        self, tenant_id: str, task_id: str, payload: dict[str, Any]
    ) -> httpx.Response:
        """PATCH /tenants/{tenant_id}/tasks/{task_id}"""
        return await self._http.patch(
            f"/tenants/{_segment(tenant_id)}/tasks/{_segment(task_id)}",
            json=payload,
        )

    async def delete_task(self, tenant_id: str, task_id: str) -> httpx.Response:
        """DELETE /tenants/{tenant_id}/tasks/{task_id}"""
        return await self._http.delete(
            f"/tenants/{_segment(tenant_id)}/tasks/{_segment(task_id)}"
        )
