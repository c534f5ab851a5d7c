"""Probe for resolving the caller of an API request from its bearer token."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class AuthenticationProbe(Protocol):
    """Domain probe for authentication operations."""

    def user_authenticated(self, user_id: str, username: str) -> None:
        """Record successful user authentication via JWT."""
        ...

    def authentication_failed(self, reason: str) -> None:
        """Record authentication failure."""
        ...

    def with_context(self, context: ObservationContext) -> AuthenticationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthenticationProbe(StructlogProbe):
    """Default implementation of AuthenticationProbe using structlog."""

    def user_authenticated(self, user_id: str, username: str) -> None:
        """Record successful user authentication via JWT."""
        self._logger.debug(
            "user_authenticated",
            user_id=user_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def authentication_failed(self, reason: str) -> None:
        """Record authentication failure."""
        self._logger.warning(
            "authentication_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )
