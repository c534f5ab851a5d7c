"""HTTP routes for tenant management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from iam.application.services import TenantService
from iam.application.value_objects import AuthenticatedUser
from iam.dependencies.tenant import get_tenant_service
from iam.dependencies.user import get_authenticated_user
from iam.ports.exceptions import DuplicateTenantSlugError
from iam.presentation.tenants.models import CreateTenantRequest, UserTenantResponse

router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)


@router.get("")
async def list_tenants(
    authenticated_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> list[UserTenantResponse]:
    """List the tenants the user is an active member of.

    Uses get_authenticated_user because this is a bootstrap endpoint: the
    client needs the list before it can pick a tenant context.
    """
    views = await service.list_user_tenants(authenticated_user.user_id)
    return [UserTenantResponse.from_view(view) for view in views]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
async def create_tenant(
    request: CreateTenantRequest,
    authenticated_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> UserTenantResponse:
    """Create a new tenant.

    The authenticated user becomes the owner of the created tenant.

    Raises:
        HTTPException: 409 if the slug is already taken
        HTTPException: 422 if the domain rejects the name or slug
    """
    try:
        tenant = await service.create_tenant(
            name=request.name,
            slug=request.slug,
            creator_id=authenticated_user.user_id,
        )
    except DuplicateTenantSlugError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Tenant with this slug already exists",
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e

    return UserTenantResponse.from_created(tenant)
