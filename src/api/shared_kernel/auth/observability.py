"""Domain probe for bearer token validation.

Captures the events that matter when the API verifies tokens issued by the
identity provider: successful validations, rejections and JWKS refreshes.
"""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class JWTValidatorProbe(Protocol):
    """Events emitted while checking bearer tokens."""

    def token_validated(self, user_id: str) -> None:
        """A token was accepted for ``user_id``."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """A token was refused; ``reason`` is safe to log."""
        ...

    def jwks_fetched(self, key_count: int) -> None:
        """Signing keys were downloaded from the provider."""
        ...

    def jwks_cache_hit(self) -> None:
        """Cached signing keys were still fresh."""
        ...

    def jwks_fetch_failed(self, error: str) -> None:
        """Discovery or key download failed."""
        ...

    def with_context(self, context: ObservationContext) -> JWTValidatorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultJWTValidatorProbe(StructlogProbe):
    """Structlog-backed JWTValidatorProbe."""

    def token_validated(self, user_id: str) -> None:
        self._logger.debug(
            "bearer_token_validated",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def token_validation_failed(self, reason: str) -> None:
        self._logger.warning(
            "bearer_token_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def jwks_fetched(self, key_count: int) -> None:
        self._logger.info(
            "identity_provider_jwks_fetched",
            key_count=key_count,
            **self._get_context_kwargs(),
        )

    def jwks_cache_hit(self) -> None:
        self._logger.debug(
            "identity_provider_jwks_cache_hit",
            **self._get_context_kwargs(),
        )

    def jwks_fetch_failed(self, error: str) -> None:
        self._logger.error(
            "identity_provider_jwks_fetch_failed",
            error=error,
            **self._get_context_kwargs(),
        )
