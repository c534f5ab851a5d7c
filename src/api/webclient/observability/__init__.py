"""Domain probes for the client session layer."""

from webclient.observability.auth_probe import AuthFlowProbe, DefaultAuthFlowProbe
from webclient.observability.query_probe import (
    DefaultQueryCacheProbe,
    QueryCacheProbe,
)
from webclient.observability.tenant_probe import (
    DefaultTenantSelectionProbe,
    TenantSelectionProbe,
)

__all__ = [
    "AuthFlowProbe",
    "DefaultAuthFlowProbe",
    "DefaultQueryCacheProbe",
    "DefaultTenantSelectionProbe",
    "QueryCacheProbe",
    "TenantSelectionProbe",
]
