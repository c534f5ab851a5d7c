"""Tenant context for the client session.

Holds the tenants the signed-in user belongs to and the one currently
selected. Code that needs the context obtains it with ``use_tenant()``
inside a ``provider.provide()`` block.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

import httpx

from webclient.api_client import TasksApiClient
from webclient.auth.session import AuthSession
from webclient.observability import (
    DefaultTenantSelectionProbe,
    TenantSelectionProbe,
)
from webclient.query_client import QueryClient
from webclient.tenancy.resolver import hostname_from_origin, resolve_tenant_slug


class TenantContextError(RuntimeError):
    """Raised when the tenant context is used outside its provider."""

    pass


@dataclass(frozen=True)
class Tenant:
    """A tenant as listed for the signed-in user."""

    id: str
    name: str
    slug: str
    plan: str
    user_role: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Tenant:
        """Decode the camelCase API representation.

        Raises:
            KeyError: If a required field is missing
        """
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            slug=str(data["slug"]),
            plan=str(data.get("plan", "")),
            user_role=str(data.get("userRole", "")),
        )


_current_provider: ContextVar[TenantContextProvider | None] = ContextVar(
    "tenant_context_provider", default=None
)


class TenantContextProvider:
    """State holder for ``loading``, ``tenants`` and ``current_tenant``.

    Starts loading with no tenants. ``sync()`` brings the state in line with
    the auth session; ``switch_tenant()`` and ``clear()`` change it in place.
    """

    def __init__(
        self,
        session: AuthSession,
        api: TasksApiClient,
        query_client: QueryClient | None = None,
        hostname: str | None = None,
        probe: TenantSelectionProbe | None = None,
    ):
        """Create the provider.

        Args:
            session: Auth session whose state drives loading
            api: API client used to list tenants
            query_client: Cache whose entries are invalidated on a switch
            hostname: Hostname the application runs under; defaults to the
                host of the configured application origin
            probe: Optional domain probe for observability
        """
        self._session = session
        self._api = api
        self._query_client = query_client
        self._hostname = (
            hostname if hostname is not None else hostname_from_origin(session.app_origin)
        )
        self._probe = probe or DefaultTenantSelectionProbe()

        self.loading = True
        self.tenants: list[Tenant] = []
        self.current_tenant: Tenant | None = None

    @property
    def subdomain_slug(self) -> str | None:
        """Tenant slug inferred from the hostname."""
        return resolve_tenant_slug(self._hostname)

    async def sync(self) -> None:
        """Evaluate the auth state and load tenants if signed in.

        Not initialized: nothing changes. Initialized but signed out:
        loading ends with no tenants. Signed in: the tenant list is fetched
        and the subdomain's tenant (else the first) is selected. A failed
        fetch is logged and keeps the last known tenants.
        """
        if not self._session.initialized:
            return

        if not self._session.authenticated:
            self.loading = False
            return

        try:
            response = await self._api.list_tenants()
            body = response.json()
            if isinstance(body, list):
                tenants = [Tenant.from_json(item) for item in body]
                self.tenants = tenants
                self.current_tenant = self._select(tenants)
                self._probe.tenants_loaded(
                    len(tenants),
                    self.current_tenant.slug if self.current_tenant else None,
                )
            else:
                self._probe.unexpected_tenants_body(type(body).__name__)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            self._probe.tenants_load_failed(str(e))
        finally:
            self.loading = False

    def _select(self, tenants: list[Tenant]) -> Tenant | None:
        slug = self.subdomain_slug
        for tenant in tenants:
            if tenant.slug == slug:
                return tenant
        return tenants[0] if tenants else None

    def switch_tenant(self, slug: str) -> None:
        """Select a loaded tenant by slug. Unknown slugs are ignored.

        Cached queries of the previously selected tenant are invalidated.
        """
        tenant = next((t for t in self.tenants if t.slug == slug), None)
        if tenant is None:
            self._probe.unknown_tenant_ignored(slug)
            return

        previous = self.current_tenant
        self.current_tenant = tenant
        self._probe.tenant_switched(previous.slug if previous else None, slug)

        if (
            previous is not None
            and previous.id != tenant.id
            and self._query_client is not None
        ):
            self._query_client.mark_invalidated(tenant_id=previous.id)

    def clear(self) -> None:
        """Forget all tenants, as on logout, and drop their cached queries."""
        if self._query_client is not None:
            for tenant in self.tenants:
                self._query_client.remove_queries(tenant_id=tenant.id)
        self.tenants = []
        self.current_tenant = None
        self.loading = False

    @contextmanager
    def provide(self) -> Iterator[TenantContextProvider]:
        """Make this provider the one returned by use_tenant() in the block."""
        token = _current_provider.set(self)
        try:
            yield self
        finally:
            _current_provider.reset(token)


def use_tenant() -> TenantContextProvider:
    """Return the provider bound by the enclosing ``provide()`` block.

    Raises:
        TenantContextError: When called outside such a block
    """
    provider = _current_provider.get()
    if provider is None:
        raise TenantContextError("use_tenant must be used within TenantProvider")
    return provider
