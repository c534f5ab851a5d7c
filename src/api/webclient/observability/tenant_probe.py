"""Domain probe for the client-side tenant context."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class TenantSelectionProbe(Protocol):
    """Domain probe for tenant list loading and selection."""

    def tenants_loaded(self, count: int, selected_slug: str | None) -> None:
        """Record that the tenant list was loaded and a tenant selected."""
        ...

    def tenants_load_failed(self, error: str) -> None:
        """Record a best-effort tenant list refresh failure."""
        ...

    def unexpected_tenants_body(self, body_type: str) -> None:
        """Record a tenant list response that was not a list."""
        ...

    def tenant_switched(self, from_slug: str | None, to_slug: str) -> None:
        """Record a tenant switch."""
        ...

    def unknown_tenant_ignored(self, slug: str) -> None:
        """Record a switch request for a tenant that is not loaded."""
        ...

    def with_context(self, context: ObservationContext) -> TenantSelectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantSelectionProbe(StructlogProbe):
    """Default implementation of TenantSelectionProbe using structlog."""

    def tenants_loaded(self, count: int, selected_slug: str | None) -> None:
        self._logger.info(
            "tenants_loaded",
            count=count,
            selected_slug=selected_slug,
            **self._get_context_kwargs(),
        )

    def tenants_load_failed(self, error: str) -> None:
        self._logger.error(
            "tenants_load_failed",
            error=error,
            **self._get_context_kwargs(),
        )

    def unexpected_tenants_body(self, body_type: str) -> None:
        self._logger.warning(
            "unexpected_tenants_body",
            body_type=body_type,
            **self._get_context_kwargs(),
        )

    def tenant_switched(self, from_slug: str | None, to_slug: str) -> None:
        self._logger.info(
            "tenant_switched",
            from_slug=from_slug,
            to_slug=to_slug,
            **self._get_context_kwargs(),
        )

    def unknown_tenant_ignored(self, slug: str) -> None:
        self._logger.debug(
            "unknown_tenant_ignored",
            slug=slug,
            **self._get_context_kwargs(),
        )
