"""Probe for tenant context resolution."""

from shared_kernel.middleware.observability.tenant_context_probe import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)

__all__ = ["DefaultTenantContextProbe", "TenantContextProbe"]
