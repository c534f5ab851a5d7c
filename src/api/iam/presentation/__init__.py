"""IAM presentation layer - aggregate-based organization.

Each aggregate package contains its own routes and models. Auth is enforced
per-endpoint: tenant endpoints use get_authenticated_user because callers
have no tenant context yet.
"""

from __future__ import annotations

from fastapi import APIRouter

from iam.presentation import tenants

router = APIRouter(tags=["iam"])

router.include_router(tenants.router)

__all__ = ["router"]
