"""IAM use cases."""

from iam.application.services.tenant_service import TenantService

__all__ = ["TenantService"]
