"""PostgreSQL implementation of ITenantRepository.

Tenants and their memberships live in two tables. The repository loads a
tenant together with its memberships and writes both back in one flush.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Membership, Tenant
from iam.domain.value_objects import (
    MembershipStatus,
    TenantId,
    TenantPlan,
    TenantRole,
    TenantSlug,
    TenantStatus,
    UserId,
)
from iam.infrastructure.models import TenantMembershipModel, TenantModel
from iam.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from iam.ports.exceptions import DuplicateTenantSlugError
from iam.ports.repositories import ITenantRepository


class TenantRepository(ITenantRepository):
    """Repository managing PostgreSQL storage for Tenant aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRepositoryProbe()

    async def save(self, tenant: Tenant) -> None:
        """Persist tenant metadata and memberships to PostgreSQL.

        Args:
            tenant: The Tenant aggregate to persist

        Raises:
            DuplicateTenantSlugError: If tenant slug already exists
        """
        existing = await self.get_by_slug(tenant.slug.value)
        if existing and existing.id != tenant.id:
            self._probe.duplicate_tenant_slug(tenant.slug.value)
            raise DuplicateTenantSlugError(
                f"Tenant with slug '{tenant.slug}' already exists"
            )

        try:
            stmt = select(TenantModel).where(TenantModel.id == tenant.id.value)
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if model is None:
                model = TenantModel(id=tenant.id.value, memberships=[])
                self._session.add(model)

            model.name = tenant.name
            model.slug = tenant.slug.value
            model.plan = tenant.plan.value
            model.status = tenant.status.value
            self._sync_memberships(model, tenant.memberships)

            await self._session.flush()
            self._probe.tenant_saved(tenant.id.value, len(tenant.memberships))

        except IntegrityError as e:
            if "uq_tenants_slug" in str(e):
                self._probe.duplicate_tenant_slug(tenant.slug.value)
                raise DuplicateTenantSlugError(
                    f"Tenant with slug '{tenant.slug}' already exists"
                ) from e
            raise

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Fetch a tenant and its memberships by id."""
        stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        self._probe.tenant_retrieved(model.id)
        return self._to_domain(model)

    async def get_by_slug(self, slug: str) -> Tenant | None:
        """Fetch a tenant and its memberships by slug."""
        stmt = select(TenantModel).where(TenantModel.slug == slug)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        self._probe.tenant_retrieved(model.id)
        return self._to_domain(model)

    async def list_for_user(self, user_id: UserId) -> list[Tenant]:
        """Fetch every tenant in which the user holds a membership."""
        stmt = (
            select(TenantModel)
            .join(TenantMembershipModel)
            .where(TenantMembershipModel.user_id == user_id.value)
            .order_by(TenantModel.name)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().unique().all()

        tenants = [self._to_domain(model) for model in models]
        self._probe.tenants_listed_for_user(user_id.value, len(tenants))
        return tenants

    @staticmethod
    def _sync_memberships(model: TenantModel, memberships: list[Membership]) -> None:
        """Bring the model's membership rows in line with the aggregate."""
        by_user = {row.user_id: row for row in model.memberships}
        wanted = {m.user_id.value for m in memberships}

        for row in list(model.memberships):
            if row.user_id not in wanted:
                model.memberships.remove(row)

        for membership in memberships:
            row = by_user.get(membership.user_id.value)
            if row is None:
                model.memberships.append(
                    TenantMembershipModel(
                        user_id=membership.user_id.value,
                        role=membership.role.value,
                        status=membership.status.value,
                    )
                )
            else:
                row.role = membership.role.value
                row.status = membership.status.value

    @staticmethod
    def _to_domain(model: TenantModel) -> Tenant:
        """Reconstitute a Tenant aggregate from its ORM model."""
        return Tenant(
            id=TenantId(value=model.id),
            name=model.name,
            slug=TenantSlug(model.slug),
            plan=TenantPlan(model.plan),
            status=TenantStatus(model.status),
            memberships=[
                Membership(
                    user_id=UserId(row.user_id),
                    role=TenantRole(row.role),
                    status=MembershipStatus(row.status),
                )
                for row in model.memberships
            ],
        )
