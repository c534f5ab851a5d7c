"""Probe for process lifecycle: startup with its effective configuration, and shutdown."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_starting(self, version: str, issuer_url: str) -> None:
        """Record that the application is starting."""
        ...

    def application_stopped(self) -> None:
        """Record that the application shut down."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe(StructlogProbe):
    """Logs lifecycle events at info level."""

    def application_starting(self, version: str, issuer_url: str) -> None:
        self._logger.info(
            "application_starting",
            version=version,
            issuer_url=issuer_url,
            **self._get_context_kwargs(),
        )

    def application_stopped(self) -> None:
        self._logger.info(
            "application_stopped",
            **self._get_context_kwargs(),
        )
