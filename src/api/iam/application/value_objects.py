"""Application-layer value objects for IAM bounded context.

These are value objects specific to the application layer, representing
cross-cutting concerns like authentication context and read-only view objects.
"""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import TenantId, TenantPlan, TenantRole, UserId


@dataclass(frozen=True)
class AuthenticatedUser:
    """Represents a user who has been authenticated but not yet scoped to a tenant.

    Used for endpoints that need authentication but not tenant context,
    such as listing available tenants or creating a new tenant.

    This is an application-layer concept (not domain) because it represents
    the authentication context of the request, not a core business entity.
    """

    user_id: UserId
    username: str
    email: str | None = None


@dataclass(frozen=True)
class UserTenant:
    """Read-only view of a tenant as seen by one of its active members."""

    id: TenantId
    name: str
    slug: str
    plan: TenantPlan
    user_role: TenantRole
