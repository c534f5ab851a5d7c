"""Tenant context FastAPI dependency.

Resolves the tenant addressed by the ``{tenant_id}`` path segment. The
segment may carry either the tenant's ULID or its slug; the caller must
hold an active membership in an active tenant.

Usage in FastAPI routes:
    @router.get("/tenants/{tenant_id}/example")
    async def example(
        tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    ):
        # tenant.tenant_id is the canonical ULID
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, status

from iam.application.services import TenantService
from iam.application.value_objects import AuthenticatedUser
from iam.dependencies.tenant import get_tenant_service
from iam.dependencies.user import get_authenticated_user
from iam.domain.value_objects import TenantId, UserId
from iam.ports.exceptions import TenantAccessDeniedError, TenantNotFoundError
from shared_kernel.middleware.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.middleware.tenant_context import TenantContext


def get_tenant_context_probe() -> TenantContextProbe:
    """Get TenantContextProbe instance for tenant context resolution."""
    return DefaultTenantContextProbe()


async def resolve_tenant_context(
    identifier: str,
    user_id: UserId,
    tenant_service: TenantService,
    probe: TenantContextProbe,
) -> TenantContext:
    """Resolve the tenant context for a request.

    This is the core logic for the tenant context dependency, kept free of
    FastAPI parameter declarations so it can be exercised directly.

    Args:
        identifier: The tenant ULID or slug from the request path.
        user_id: The authenticated user's ID.
        tenant_service: Service performing the lookup and membership check.
        probe: Domain probe for observability.

    Returns:
        TenantContext with the canonical tenant ID and the user's role.

    Raises:
        HTTPException 404: If no active tenant matches the identifier.
        HTTPException 403: If the user is not an active member.
    """
    identifier = identifier.strip()

    try:
        tenant, role = await tenant_service.resolve_tenant(identifier, user_id)
    except TenantNotFoundError:
        probe.tenant_not_found(identifier=identifier, user_id=user_id.value)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tenant not found",
        )
    except TenantAccessDeniedError:
        probe.tenant_access_denied(tenant_id=identifier, user_id=user_id.value)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied to this tenant",
        )

    source = "id" if TenantId.is_valid(identifier) else "slug"
    probe.tenant_resolved(
        tenant_id=tenant.id.value,
        user_id=user_id.value,
        source=source,
    )

    return TenantContext(
        tenant_id=tenant.id.value,
        slug=tenant.slug.value,
        user_id=user_id.value,
        user_role=role.value,
        source=source,
    )


async def get_tenant_context(
    tenant_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    tenant_service: Annotated[TenantService, Depends(get_tenant_service)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
) -> TenantContext:
    """FastAPI dependency resolving the ``tenant_id`` path parameter."""
    return await resolve_tenant_context(
        identifier=tenant_id,
        user_id=user.user_id,
        tenant_service=tenant_service,
        probe=probe,
    )
