"""Tenant aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, field

from iam.domain.value_objects import (
    MembershipStatus,
    TenantId,
    TenantPlan,
    TenantRole,
    TenantSlug,
    TenantStatus,
    UserId,
)


@dataclass(frozen=True)
class Membership:
    """A user's membership in a tenant."""

    user_id: UserId
    role: TenantRole
    status: MembershipStatus = MembershipStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        """Whether the membership grants access."""
        return self.status == MembershipStatus.ACTIVE


@dataclass
class Tenant:
    """Tenant aggregate representing an organization in the system.

    Tenants are the top-level isolation boundary: every task belongs to
    exactly one tenant.

    Business rules:
    - Tenant slugs are globally unique (enforced by the repository)
    - A user has at most one membership per tenant
    - Only active tenants can be accessed, and only through an active membership
    """

    id: TenantId
    name: str
    slug: TenantSlug
    plan: TenantPlan = TenantPlan.STARTER
    status: TenantStatus = TenantStatus.ACTIVE
    memberships: list[Membership] = field(default_factory=list)

    @classmethod
    def create(cls, name: str, slug: str, owner_id: UserId) -> Tenant:
        """Create a new tenant owned by the given user.

        Args:
            name: Display name of the tenant
            slug: Routing slug (subdomain label)
            owner_id: User that becomes the tenant's owner

        Returns:
            A new active Tenant with a single owner membership

        Raises:
            ValueError: If the name is blank or the slug is malformed
        """
        if not name or not name.strip():
            raise ValueError("Tenant name must not be empty")

        tenant = cls(
            id=TenantId.generate(),
            name=name.strip(),
            slug=TenantSlug(slug),
        )
        tenant.add_member(user_id=owner_id, role=TenantRole.OWNER)
        return tenant

    @property
    def is_active(self) -> bool:
        """Whether the tenant can be accessed."""
        return self.status == TenantStatus.ACTIVE

    def add_member(
        self,
        user_id: UserId,
        role: TenantRole,
        status: MembershipStatus = MembershipStatus.ACTIVE,
    ) -> Membership:
        """Add a member, replacing any existing membership for the user."""
        self.memberships = [m for m in self.memberships if m.user_id != user_id]
        membership = Membership(user_id=user_id, role=role, status=status)
        self.memberships.append(membership)
        return membership

    def membership_for(self, user_id: UserId) -> Membership | None:
        """Return the user's membership, or None if they are not a member."""
        for membership in self.memberships:
            if membership.user_id == user_id:
                return membership
        return None

    def active_role_of(self, user_id: UserId) -> TenantRole | None:
        """Return the user's role if tenant and membership are both active."""
        if not self.is_active:
            return None
        membership = self.membership_for(user_id)
        if membership is None or not membership.is_active:
            return None
        return membership.role
