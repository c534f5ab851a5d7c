"""Probe for resolving the tenant a request addresses.

Events carry the user and, once known, the tenant id so that rejected
lookups can be traced back to a caller.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class TenantContextProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_resolved(self, tenant_id: str, user_id: str, source: str) -> None:
        """Record that tenant context was resolved for a request."""
        ...

    def tenant_not_found(self, identifier: str, user_id: str) -> None:
        """Record that the requested tenant does not exist or is inactive."""
        ...

    def tenant_access_denied(self, tenant_id: str, user_id: str) -> None:
        """Record that user was denied access to the requested tenant."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe(StructlogProbe):
    """Structlog-backed TenantContextProbe."""

    def tenant_resolved(self, tenant_id: str, user_id: str, source: str) -> None:
        self._logger.debug(
            "tenant_context_resolved",
            tenant_id=tenant_id,
            user_id=user_id,
            source=source,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, identifier: str, user_id: str) -> None:
        self._logger.warning(
            "tenant_context_not_found",
            identifier=identifier,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def tenant_access_denied(self, tenant_id: str, user_id: str) -> None:
        self._logger.warning(
            "tenant_context_access_denied",
            tenant_id=tenant_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )
