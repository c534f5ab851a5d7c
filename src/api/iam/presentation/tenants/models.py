"""Pydantic models for tenant API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from iam.application.value_objects import UserTenant
from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantPlan, TenantRole


class CreateTenantRequest(BaseModel):
    """Request model for creating a tenant."""

    name: str = Field(..., description="Tenant name", min_length=1, max_length=255)
    slug: str = Field(
        ...,
        description="Routing slug, used as the tenant's subdomain",
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$",
    )


class UserTenantResponse(BaseModel):
    """A tenant as seen by the requesting user."""

    id: str = Field(..., description="Tenant ID (ULID format)")
    name: str = Field(..., description="Tenant name")
    slug: str = Field(..., description="Routing slug")
    plan: TenantPlan = Field(..., description="Commercial plan")
    user_role: TenantRole = Field(
        ...,
        serialization_alias="userRole",
        description="The requesting user's role in the tenant",
    )

    @classmethod
    def from_view(cls, view: UserTenant) -> UserTenantResponse:
        """Convert an application-layer UserTenant view to API response."""
        return cls(
            id=view.id.value,
            name=view.name,
            slug=view.slug,
            plan=view.plan,
            user_role=view.user_role,
        )

    @classmethod
    def from_created(cls, tenant: Tenant) -> UserTenantResponse:
        """Convert a freshly created tenant; its creator is the owner."""
        return cls(
            id=tenant.id.value,
            name=tenant.name,
            slug=tenant.slug.value,
            plan=tenant.plan,
            user_role=TenantRole.OWNER,
        )
