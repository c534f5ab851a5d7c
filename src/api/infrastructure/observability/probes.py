"""Probe for the database engine: creation, schema bootstrap and pool shutdown."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class ConnectionProbe(Protocol):
    """Domain probe for database engine observability."""

    def engine_created(self, connection_string: str, pool_size: int) -> None:
        """Record that a database engine was created."""
        ...

    def schema_created(self, table_count: int) -> None:
        """Record that missing tables were created."""
        ...

    def pool_closed(self) -> None:
        """Record that the connection pool was closed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe(StructlogProbe):
    """ConnectionProbe that logs through structlog."""

    def engine_created(self, connection_string: str, pool_size: int) -> None:
        self._logger.info(
            "database_engine_created",
            connection_string=connection_string,
            pool_size=pool_size,
            **self._get_context_kwargs(),
        )

    def schema_created(self, table_count: int) -> None:
        self._logger.info(
            "database_schema_created",
            table_count=table_count,
            **self._get_context_kwargs(),
        )

    def pool_closed(self) -> None:
        self._logger.info(
            "connection_pool_closed",
            **self._get_context_kwargs(),
        )
