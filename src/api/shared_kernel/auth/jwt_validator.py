"""Bearer token validation against the identity provider's signing keys.

Keys come from the JWKS advertised in the provider's discovery document and
are kept per validator for ``jwks_cache_ttl``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe

# Substring of a jose claims error -> message reported to the caller.
_CLAIM_ERRORS = (
    ("audience", "Invalid audience claim"),
    ("issuer", "Invalid issuer claim"),
)


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by an accepted token."""

    sub: str
    preferred_username: str | None
    raw_claims: dict[str, Any] = field(default_factory=dict)

    @property
    def email(self) -> str | None:
        """Email claim, when the token carries one."""
        value = self.raw_claims.get("email")
        return str(value) if value is not None else None


class InvalidTokenError(Exception):
    """The bearer token was rejected."""


class JWKSCache:
    """Signing keys of one issuer, downloaded again once older than the TTL."""

    def __init__(self, issuer_url: str, probe: JWTValidatorProbe, ttl: timedelta):
        self._discovery_url = f"{issuer_url}/.well-known/openid-configuration"
        self._probe = probe
        self._ttl = ttl
        self._keys: dict[str, Any] | None = None
        self._expires_at: datetime | None = None
        self._lock = asyncio.Lock()

    def _fresh(self) -> bool:
        if self._keys is None or self._expires_at is None:
            return False
        return datetime.now(tz=timezone.utc) < self._expires_at

    async def get(self) -> dict[str, Any]:
        """Return the key set, downloading it when missing or stale.

        Raises:
            InvalidTokenError: If the provider cannot be reached.
        """
        if not self._fresh():
            async with self._lock:
                # A concurrent caller may have refreshed while we waited.
                if not self._fresh():
                    self._keys = await self._download()
                    self._expires_at = datetime.now(tz=timezone.utc) + self._ttl
                    return self._keys

        self._probe.jwks_cache_hit()
        return self._keys  # type: ignore[return-value]

    async def _download(self) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient() as client:
                discovery = await self._get_json(client, self._discovery_url)
                jwks_uri = discovery.get("jwks_uri")
                if not jwks_uri:
                    self._probe.jwks_fetch_failed(
                        error="Missing jwks_uri in OpenID configuration"
                    )
                    raise InvalidTokenError(
                        "OIDC provider missing jwks_uri in configuration"
                    )
                keys = await self._get_json(client, jwks_uri)
        except httpx.HTTPError as e:
            self._probe.jwks_fetch_failed(error=str(e))
            raise InvalidTokenError(
                f"Failed to fetch JWKS from OIDC provider: {e}"
            ) from e

        self._probe.jwks_fetched(key_count=len(keys.get("keys", [])))
        return keys

    @staticmethod
    async def _get_json(client: httpx.AsyncClient, url: str) -> dict[str, Any]:
        response = await client.get(url)
        response.raise_for_status()
        return response.json()


class JWTValidator:
    """Accepts RS256 access tokens issued by one realm.

    Checks signature, expiry, issuer and audience and, when
    ``authorized_party`` is set, that the token was issued to that client
    (``azp`` claim).
    """

    def __init__(
        self,
        issuer_url: str,
        audience: str,
        probe: JWTValidatorProbe,
        authorized_party: str | None = None,
        user_id_claim: str = "sub",
        username_claim: str = "preferred_username",
        jwks_cache_ttl: timedelta = timedelta(hours=24),
    ):
        """Initialize the validator.

        Args:
            issuer_url: Realm URL of the identity provider.
            audience: Expected ``aud`` claim.
            probe: Observability probe.
            authorized_party: Client id expected in ``azp``; ``None`` skips the check.
            user_id_claim: Claim holding the user id.
            username_claim: Claim holding the display username.
            jwks_cache_ttl: How long downloaded keys are reused.
        """
        self._issuer_url = issuer_url.rstrip("/")
        self._audience = audience
        self._probe = probe
        self._authorized_party = authorized_party
        self._user_id_claim = user_id_claim
        self._username_claim = username_claim
        self._jwks = JWKSCache(self._issuer_url, probe, jwks_cache_ttl)

    async def validate_token(self, token: str) -> TokenClaims:
        """Validate a bearer token and return its identity claims.

        Raises:
            InvalidTokenError: If the token is malformed, expired, not meant
                for this API or the signing keys cannot be loaded.
        """
        self._check_header(token)
        claims = self._decode(token, await self._jwks.get())
        self._check_authorized_party(claims)

        user_id = claims.get(self._user_id_claim)
        if user_id is None:
            raise self._reject(
                f"Missing {self._user_id_claim} claim",
                f"Missing required claim: {self._user_id_claim}",
            )

        username = claims.get(self._username_claim)
        self._probe.token_validated(user_id=str(user_id))
        return TokenClaims(
            sub=str(user_id),
            preferred_username=str(username) if username is not None else None,
            raw_claims=dict(claims),
        )

    def _reject(self, reason: str, message: str) -> InvalidTokenError:
        self._probe.token_validation_failed(reason=reason)
        return InvalidTokenError(message)

    def _check_header(self, token: str) -> None:
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise self._reject(
                f"Malformed token: {e}", f"Invalid token format: {e}"
            ) from e
        if not header:
            raise self._reject("Missing token header", "Invalid token: missing header")

    def _decode(self, token: str, jwks: dict[str, Any]) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                jwks,
                algorithms=["RS256"],
                audience=self._audience,
                issuer=self._issuer_url,
                options={"verify_iat": True},
            )
        except ExpiredSignatureError as e:
            raise self._reject("Token expired", "Token has expired") from e
        except JWTClaimsError as e:
            detail = str(e).lower()
            for needle, message in _CLAIM_ERRORS:
                if needle in detail:
                    raise self._reject(message, message) from e
            raise self._reject(
                f"Claims error: {e}", f"Invalid token claims: {e}"
            ) from e
        except JWTError as e:
            if "signature" in str(e).lower():
                raise self._reject("Invalid signature", "Invalid token signature") from e
            raise self._reject(f"JWT error: {e}", f"Invalid token: {e}") from e

    def _check_authorized_party(self, claims: dict[str, Any]) -> None:
        if self._authorized_party is None:
            return
        azp = claims.get("azp")
        if azp != self._authorized_party:
            raise self._reject(
                f"Unexpected authorized party: {azp}",
                f"Invalid client ID. Expected {self._authorized_party}, got {azp}",
            )
