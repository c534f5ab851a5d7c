"""Tenant application service for IAM bounded context.

Handles tenant operations available to an authenticated user: listing the
tenants they belong to, creating a new tenant, and resolving which tenant a
request addresses.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultTenantServiceProbe, TenantServiceProbe
from iam.application.value_objects import UserTenant
from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantId, TenantRole, UserId
from iam.ports.exceptions import (
    DuplicateTenantSlugError,
    TenantAccessDeniedError,
    TenantNotFoundError,
)
from iam.ports.repositories import ITenantRepository


class TenantService:
    """Application service for tenant management.

    Writes are committed on the request session once the repository has
    flushed them.
    """

    def __init__(
        self,
        tenant_repository: ITenantRepository,
        session: AsyncSession,
        probe: TenantServiceProbe | None = None,
    ):
        """Initialize TenantService with dependencies.

        Args:
            tenant_repository: Repository for tenant persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._tenant_repository = tenant_repository
        self._session = session
        self._probe = probe or DefaultTenantServiceProbe()

    async def list_user_tenants(self, user_id: UserId) -> list[UserTenant]:
        """List the active tenants in which the user has an active membership.

        Args:
            user_id: The user whose tenants to list

        Returns:
            UserTenant views carrying the user's role in each tenant
        """
        tenants = await self._tenant_repository.list_for_user(user_id)

        views: list[UserTenant] = []
        for tenant in tenants:
            role = tenant.active_role_of(user_id)
            if role is None:
                continue
            views.append(
                UserTenant(
                    id=tenant.id,
                    name=tenant.name,
                    slug=tenant.slug.value,
                    plan=tenant.plan,
                    user_role=role,
                )
            )

        self._probe.user_tenants_listed(user_id=user_id.value, count=len(views))
        return views

    async def create_tenant(self, name: str, slug: str, creator_id: UserId) -> Tenant:
        """Create a new tenant owned by the creator.

        Args:
            name: The display name of the tenant
            slug: The routing slug of the tenant
            creator_id: User creating the tenant (becomes its owner)

        Returns:
            The created Tenant aggregate

        Raises:
            DuplicateTenantSlugError: If a tenant with this slug already exists
            ValueError: If name or slug are invalid
        """
        tenant = Tenant.create(name=name, slug=slug, owner_id=creator_id)

        try:
            await self._tenant_repository.save(tenant)
        except DuplicateTenantSlugError:
            await self._session.rollback()
            self._probe.duplicate_tenant_slug(slug=slug)
            raise

        await self._session.commit()

        self._probe.tenant_created(
            tenant_id=tenant.id.value,
            slug=tenant.slug.value,
            owner_id=creator_id.value,
        )
        return tenant

    async def resolve_tenant(
        self, identifier: str, user_id: UserId
    ) -> tuple[Tenant, TenantRole]:
        """Resolve a tenant by id or slug and check the user's access.

        Identifiers that parse as a ULID are looked up by id, anything else
        by slug.

        Args:
            identifier: Tenant id or slug taken from the request path
            user_id: The authenticated user

        Returns:
            The tenant and the user's role in it

        Raises:
            TenantNotFoundError: If no active tenant matches the identifier
            TenantAccessDeniedError: If the user has no active membership
        """
        if TenantId.is_valid(identifier):
            tenant = await self._tenant_repository.get_by_id(
                TenantId.from_string(identifier)
            )
        else:
            tenant = await self._tenant_repository.get_by_slug(identifier)

        if tenant is None or not tenant.is_active:
            raise TenantNotFoundError(f"Tenant '{identifier}' not found")

        role = tenant.active_role_of(user_id)
        if role is None:
            raise TenantAccessDeniedError(
                f"User {user_id} has no access to tenant {tenant.id}"
            )

        return tenant, role
