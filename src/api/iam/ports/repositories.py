"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates without tying the application layer to PostgreSQL.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantId, UserId


@runtime_checkable
class ITenantRepository(Protocol):
    """Repository for Tenant aggregate persistence.

    Tenants are always returned with their memberships loaded.
    """

    async def save(self, tenant: Tenant) -> None:
        """Persist a tenant aggregate and its memberships.

        Creates a new tenant or updates an existing one.

        Args:
            tenant: The Tenant aggregate to persist

        Raises:
            DuplicateTenantSlugError: If the slug is already used by another tenant
        """
        ...

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by its ID.

        Returns:
            The Tenant aggregate, or None if not found
        """
        ...

    async def get_by_slug(self, slug: str) -> Tenant | None:
        """Retrieve a tenant by its slug.

        Returns:
            The Tenant aggregate, or None if not found
        """
        ...

    async def list_for_user(self, user_id: UserId) -> list[Tenant]:
        """List tenants in which the user has a membership of any status.

        Returns:
            Tenants ordered by name
        """
        ...
