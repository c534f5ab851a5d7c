"""Tenant context value object for resolved tenant identification.

This module contains the pure value object that represents a resolved
tenant context. It is framework-agnostic and contains no business logic,
making it safe for the shared kernel.

The actual resolution logic (path parameter parsing, membership checks)
lives in the IAM bounded context's dependency layer.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant context for the current request.

    Attributes:
        tenant_id: The tenant's canonical identifier (ULID string).
        slug: The tenant's routing slug.
        user_id: The authenticated user the context was resolved for.
        user_role: The user's role within the tenant.
        source: How the tenant was identified - 'id' when the request named
            the tenant by ULID, 'slug' when it used the routing slug.
    """

    tenant_id: str
    slug: str
    user_id: str
    user_role: str
    source: str
