"""Domain probe for the query cache."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class QueryCacheProbe(Protocol):
    """Domain probe for query cache events."""

    def query_fetched(self, key: str) -> None:
        """Record that a fetch result was stored under a key."""
        ...

    def stale_result_discarded(self, key: str) -> None:
        """Record that a late result was dropped because its key moved on."""
        ...

    def queries_invalidated(self, count: int, tenant_id: str | None) -> None:
        """Record that entries were marked invalid."""
        ...

    def refetch_failed(self, key: str, error: str) -> None:
        """Record that a refetch after invalidation failed."""
        ...

    def mutation_rolled_back(self, key: str, error: str) -> None:
        """Record that an optimistic update was reverted."""
        ...

    def with_context(self, context: ObservationContext) -> QueryCacheProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultQueryCacheProbe(StructlogProbe):
    """Default implementation of QueryCacheProbe using structlog."""

    def query_fetched(self, key: str) -> None:
        self._logger.debug("query_fetched", key=key, **self._get_context_kwargs())

    def stale_result_discarded(self, key: str) -> None:
        self._logger.debug(
            "stale_result_discarded",
            key=key,
            **self._get_context_kwargs(),
        )

    def queries_invalidated(self, count: int, tenant_id: str | None) -> None:
        self._logger.debug(
            "queries_invalidated",
            count=count,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def refetch_failed(self, key: str, error: str) -> None:
        self._logger.warning(
            "refetch_failed",
            key=key,
            error=error,
            **self._get_context_kwargs(),
        )

    def mutation_rolled_back(self, key: str, error: str) -> None:
        self._logger.warning(
            "mutation_rolled_back",
            key=key,
            error=error,
            **self._get_context_kwargs(),
        )
