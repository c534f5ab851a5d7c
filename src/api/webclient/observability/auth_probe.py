"""Domain probe for the client-side authentication flow."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class AuthFlowProbe(Protocol):
    """Domain probe for identity provider interactions."""

    def discovery_loaded(self, issuer_url: str) -> None:
        """Record that the discovery document was fetched."""
        ...

    def session_initialized(self, authenticated: bool, on_load: str | None) -> None:
        """Record the outcome of the first initialization."""
        ...

    def login_url_created(self, redirect_uri: str) -> None:
        """Record that an authorization request was prepared."""
        ...

    def tokens_received(self, subject: str | None, grant_type: str) -> None:
        """Record that the token endpoint issued tokens."""
        ...

    def token_refresh_failed(self, error: str) -> None:
        """Record that a refresh grant was rejected."""
        ...

    def invalid_state(self, state: str) -> None:
        """Record a callback carrying an unknown state."""
        ...

    def logged_out(self, subject: str | None) -> None:
        """Record that the local session was cleared."""
        ...

    def with_context(self, context: ObservationContext) -> AuthFlowProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthFlowProbe(StructlogProbe):
    """Default implementation of AuthFlowProbe using structlog."""

    def discovery_loaded(self, issuer_url: str) -> None:
        self._logger.debug(
            "oidc_discovery_loaded",
            issuer_url=issuer_url,
            **self._get_context_kwargs(),
        )

    def session_initialized(self, authenticated: bool, on_load: str | None) -> None:
        self._logger.info(
            "auth_session_initialized",
            authenticated=authenticated,
            on_load=on_load,
            **self._get_context_kwargs(),
        )

    def login_url_created(self, redirect_uri: str) -> None:
        self._logger.debug(
            "oidc_login_url_created",
            redirect_uri=redirect_uri,
            **self._get_context_kwargs(),
        )

    def tokens_received(self, subject: str | None, grant_type: str) -> None:
        self._logger.info(
            "oidc_tokens_received",
            subject=subject,
            grant_type=grant_type,
            **self._get_context_kwargs(),
        )

    def token_refresh_failed(self, error: str) -> None:
        self._logger.warning(
            "oidc_token_refresh_failed",
            error=error,
            **self._get_context_kwargs(),
        )

    def invalid_state(self, state: str) -> None:
        self._logger.warning(
            "oidc_invalid_state",
            state=state,
            **self._get_context_kwargs(),
        )

    def logged_out(self, subject: str | None) -> None:
        self._logger.info(
            "auth_session_logged_out",
            subject=subject,
            **self._get_context_kwargs(),
        )
