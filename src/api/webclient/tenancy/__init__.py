"""Tenant resolution and context for the client session layer."""

from webclient.tenancy.context import (
    Tenant,
    TenantContextError,
    TenantContextProvider,
    use_tenant,
)
from webclient.tenancy.resolver import hostname_from_origin, resolve_tenant_slug

__all__ = [
    "Tenant",
    "TenantContextError",
    "TenantContextProvider",
    "hostname_from_origin",
    "resolve_tenant_slug",
    "use_tenant",
]
