"""Probes for IAM persistence."""

from iam.infrastructure.observability.repository_probe import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)

__all__ = ["DefaultTenantRepositoryProbe", "TenantRepositoryProbe"]
