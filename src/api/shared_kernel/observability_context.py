"""Shared pieces of the domain probes.

Every bounded context exposes its instrumentation as a probe: a Protocol
naming the domain events plus a structlog-backed default. The defaults
share ``StructlogProbe`` and carry an optional ``ObservationContext`` whose
fields are appended to every event they log.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Self

import structlog


@dataclass(frozen=True)
class ObservationContext:
    """Request-scoped metadata attached to probe events.

    Attributes:
        request_id: Correlation id of the request being served.
        user_id: Authenticated user, when known.
        tenant_id: Tenant the request addresses, when resolved.
        extra: Any other key/value pairs to log.

    Example:
        context = ObservationContext(request_id="req-123", tenant_id="01J...")
        probe = DefaultTaskServiceProbe().with_context(context)
    """

    request_id: str | None = None
    user_id: str | None = None
    tenant_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Flatten to logging kwargs, leaving out unset fields."""
        named = {
            "request_id": self.request_id,
            "user_id": self.user_id,
            "tenant_id": self.tenant_id,
        }
        result = {key: value for key, value in named.items() if value is not None}
        result.update(self.extra)
        return result


class StructlogProbe:
    """Logger and bound context shared by the default probe implementations."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> Self:
        """Return a probe of the same type logging to the same logger with ``context``."""
        return type(self)(logger=self._logger, context=context)
