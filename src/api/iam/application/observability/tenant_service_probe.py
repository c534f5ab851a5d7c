"""Probe for the tenant application service."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class TenantServiceProbe(Protocol):
    """Domain probe for tenant application service operations."""

    def tenant_created(self, tenant_id: str, slug: str, owner_id: str) -> None:
        """Record that a tenant was created."""
        ...

    def user_tenants_listed(self, user_id: str, count: int) -> None:
        """Record that a user's tenants were listed."""
        ...

    def duplicate_tenant_slug(self, slug: str) -> None:
        """Record that a duplicate tenant slug was rejected."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe(StructlogProbe):
    """Default implementation of TenantServiceProbe using structlog."""

    def tenant_created(self, tenant_id: str, slug: str, owner_id: str) -> None:
        """Record that a tenant was created."""
        self._logger.info(
            "tenant_created",
            tenant_id=tenant_id,
            slug=slug,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )

    def user_tenants_listed(self, user_id: str, count: int) -> None:
        """Record that a user's tenants were listed."""
        self._logger.debug(
            "user_tenants_listed",
            user_id=user_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def duplicate_tenant_slug(self, slug: str) -> None:
        """Record that a duplicate tenant slug was rejected."""
        self._logger.warning(
            "duplicate_tenant_slug",
            slug=slug,
            **self._get_context_kwargs(),
        )
