"""FastAPI wiring for the tenant service.

The repository and the service receive the same request session, since
FastAPI resolves ``get_session`` once per request.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from iam.application.services import TenantService
from iam.infrastructure.tenant_repository import TenantRepository
from infrastructure.database.dependencies import get_session

RequestSession = Annotated[AsyncSession, Depends(get_session)]


def get_tenant_service_probe() -> TenantServiceProbe:
    return DefaultTenantServiceProbe()


def get_tenant_repository(session: RequestSession) -> TenantRepository:
    return TenantRepository(session=session)


def get_tenant_service(
    session: RequestSession,
    repository: Annotated[TenantRepository, Depends(get_tenant_repository)],
    probe: Annotated[TenantServiceProbe, Depends(get_tenant_service_probe)],
) -> TenantService:
    """Build the tenant service for the current request."""
    return TenantService(tenant_repository=repository, session=session, probe=probe)
