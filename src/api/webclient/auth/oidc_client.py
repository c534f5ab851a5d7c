"""OpenID Connect client for a public (browser-style) application.

Runs the authorization code flow with PKCE against the identity provider,
keeps the resulting tokens in memory and refreshes them on demand. Tokens
are decoded without signature verification; the API verifies them.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
import time
import urllib.parse
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
from jose import JWTError, jwt

from webclient.observability import AuthFlowProbe, DefaultAuthFlowProbe

SUPPORTED_PKCE_METHODS = frozenset({"S256"})
ON_LOAD_MODES = frozenset({"check-sso", "login-required"})
MAX_PENDING_LOGINS = 10


class OIDCError(Exception):
    """Raised when the identity provider rejects a request."""

    pass


class LoginRequiredError(OIDCError):
    """Raised by init(on_load="login-required") when no session exists.

    Attributes:
        login_url: Authorization URL the user should be sent to, if a
            redirect URI was available to build one.
    """

    def __init__(self, login_url: str | None):
        super().__init__("Login required")
        self.login_url = login_url


@dataclass(frozen=True)
class InitOptions:
    """Options for OIDCClient.init.

    ``code`` and ``state`` carry a pending authorization response (the query
    parameters of the redirect back to the application). ``refresh_token``
    lets a stored session be resumed silently.
    """

    on_load: str | None = "check-sso"
    pkce_method: str = "S256"
    silent_check_sso_redirect_uri: str | None = None
    check_login_iframe: bool = False
    redirect_uri: str | None = None
    code: str | None = None
    state: str | None = None
    refresh_token: str | None = None


def _generate_pkce_pair() -> tuple[str, str]:
    """Generate PKCE code_verifier and code_challenge.

    Uses S256 challenge method as recommended by RFC 7636.

    Returns:
        Tuple of (code_verifier, code_challenge)
    """
    code_verifier = secrets.token_urlsafe(32)
    code_challenge = (
        base64.urlsafe_b64encode(hashlib.sha256(code_verifier.encode()).digest())
        .decode()
        .rstrip("=")
    )
    return code_verifier, code_challenge


def _error_description(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(
            body.get("error_description") or body.get("error") or response.status_code
        )
    return f"HTTP {response.status_code}"


class OIDCClient:
    """Identity provider client holding one user's session.

    Attributes:
        authenticated: Whether an access token is currently held.
        token: The raw access token.
        refresh_token: The raw refresh token.
        id_token: The raw ID token.
        token_parsed: Claims of the access token.
        subject: The ``sub`` claim of the access token.
    """

    def __init__(
        self,
        url: str,
        realm: str,
        client_id: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        probe: AuthFlowProbe | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.url = url.rstrip("/")
        self.realm = realm
        self.client_id = client_id
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._probe = probe or DefaultAuthFlowProbe()
        self._clock = clock

        base = f"{self.issuer_url}/protocol/openid-connect"
        self._endpoints: dict[str, str] = {
            "authorization_endpoint": f"{base}/auth",
            "token_endpoint": f"{base}/token",
            "end_session_endpoint": f"{base}/logout",
        }
        self._discovery_loaded = False
        self._pending: dict[str, dict[str, str]] = {}

        self.authenticated = False
        self.token: str | None = None
        self.refresh_token: str | None = None
        self.id_token: str | None = None
        self.token_parsed: dict[str, Any] | None = None
        self.subject: str | None = None

    @property
    def issuer_url(self) -> str:
        """The realm issuer, ``<url>/realms/<realm>``."""
        return f"{self.url}/realms/{self.realm}"

    async def aclose(self) -> None:
        """Close the HTTP connection pool."""
        await self._http.aclose()

    async def load_discovery(self) -> dict[str, Any]:
        """Fetch the OpenID configuration and adopt its endpoints.

        Raises:
            httpx.HTTPError: If the document cannot be fetched.
        """
        response = await self._http.get(
            f"{self.issuer_url}/.well-known/openid-configuration"
        )
        response.raise_for_status()
        discovery = response.json()

        for name in self._endpoints:
            if discovery.get(name):
                self._endpoints[name] = discovery[name]
        self._discovery_loaded = True
        self._probe.discovery_loaded(self.issuer_url)
        return discovery

    async def init(self, options: InitOptions | None = None) -> bool:
        """Establish the session, if one can be established without user input.

        In order: exchange a pending authorization code, else resume a session
        with the refresh token, else stay unauthenticated.

        Returns:
            Whether the client is authenticated afterwards.

        Raises:
            ValueError: For an unsupported PKCE method or on_load mode.
            LoginRequiredError: If on_load is "login-required" and no
                session could be established.
            OIDCError: If a pending authorization code is rejected.
            httpx.HTTPError: On transport failures.
        """
        options = options or InitOptions()
        if options.pkce_method not in SUPPORTED_PKCE_METHODS:
            raise ValueError(f"Unsupported PKCE method: {options.pkce_method}")
        if options.on_load is not None and options.on_load not in ON_LOAD_MODES:
            raise ValueError(f"Unsupported on_load mode: {options.on_load}")

        if not self._discovery_loaded:
            await self.load_discovery()

        if options.code and options.state:
            await self.handle_callback(options.code, options.state, options.redirect_uri)
        elif options.on_load is not None:
            if options.refresh_token:
                self.refresh_token = options.refresh_token
            if self.refresh_token:
                await self._refresh_silently()

        if not self.authenticated and options.on_load == "login-required":
            login_url = (
                self.create_login_url(options.redirect_uri)
                if options.redirect_uri
                else None
            )
            raise LoginRequiredError(login_url)

        return self.authenticated

    def create_login_url(self, redirect_uri: str, scope: str = "openid") -> str:
        """Build an authorization request URL.

        A fresh state, nonce and S256 code challenge are generated; the code
        verifier is kept until the matching callback arrives. At most
        MAX_PENDING_LOGINS attempts are remembered, oldest dropped first.
        """
        code_verifier, code_challenge = _generate_pkce_pair()
        state = secrets.token_urlsafe(32)
        nonce = secrets.token_urlsafe(32)

        while len(self._pending) >= MAX_PENDING_LOGINS:
            del self._pending[next(iter(self._pending))]
        self._pending[state] = {
            "code_verifier": code_verifier,
            "nonce": nonce,
            "redirect_uri": redirect_uri,
        }

        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "scope": scope,
            "redirect_uri": redirect_uri,
            "state": state,
            "nonce": nonce,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }
        self._probe.login_url_created(redirect_uri)
        return (
            f"{self._endpoints['authorization_endpoint']}?"
            f"{urllib.parse.urlencode(params)}"
        )

    async def handle_callback(
        self, code: str, state: str, redirect_uri: str | None = None
    ) -> bool:
        """Exchange an authorization code for tokens.

        Raises:
            OIDCError: For an unknown state, a rejected code or a nonce
                mismatch.
        """
        pending = self._pending.pop(state, None)
        if pending is None:
            self._probe.invalid_state(state)
            raise OIDCError("Invalid state parameter")

        tokens = await self._token_request(
            {
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "code": code,
                "redirect_uri": redirect_uri or pending["redirect_uri"],
                "code_verifier": pending["code_verifier"],
            }
        )
        self._set_tokens(tokens, grant_type="authorization_code")

        if self.id_token:
            id_claims = self._parse(self.id_token)
            if id_claims.get("nonce") not in (None, pending["nonce"]):
                self.clear_tokens()
                raise OIDCError("Invalid nonce")

        return True

    def is_token_expired(self, min_validity: float = 0) -> bool:
        """Whether the access token expires within ``min_validity`` seconds."""
        if self.token_parsed is None:
            return True
        exp = self.token_parsed.get("exp")
        if exp is None:
            return False
        return float(exp) - self._clock() < min_validity

    async def update_token(self, min_validity: float = 5) -> bool:
        """Refresh the access token if it expires within ``min_validity`` seconds.

        Returns:
            True if the token was refreshed, False if it was still valid.

        Raises:
            OIDCError: If there is no session or the refresh is rejected.
        """
        if self.refresh_token is None:
            raise OIDCError("Not authenticated")
        if not self.is_token_expired(min_validity):
            return False

        tokens = await self._token_request(
            {
                "grant_type": "refresh_token",
                "client_id": self.client_id,
                "refresh_token": self.refresh_token,
            }
        )
        self._set_tokens(tokens, grant_type="refresh_token")
        return True

    def create_logout_url(self, redirect_uri: str | None = None) -> str:
        """Build the end-session URL, redirecting to ``redirect_uri`` afterwards."""
        params = {"client_id": self.client_id}
        if redirect_uri:
            params["post_logout_redirect_uri"] = redirect_uri
        if self.id_token:
            params["id_token_hint"] = self.id_token
        return (
            f"{self._endpoints['end_session_endpoint']}?"
            f"{urllib.parse.urlencode(params)}"
        )

    def logout(self, redirect_uri: str | None = None) -> str:
        """Forget the local session and return the end-session URL."""
        url = self.create_logout_url(redirect_uri)
        self._probe.logged_out(self.subject)
        self.clear_tokens()
        return url

    def clear_tokens(self) -> None:
        """Drop every token held by the client."""
        self.authenticated = False
        self.token = None
        self.refresh_token = None
        self.id_token = None
        self.token_parsed = None
        self.subject = None

    async def _refresh_silently(self) -> bool:
        try:
            tokens = await self._token_request(
                {
                    "grant_type": "refresh_token",
                    "client_id": self.client_id,
                    "refresh_token": self.refresh_token or "",
                }
            )
        except OIDCError as e:
            self._probe.token_refresh_failed(str(e))
            self.clear_tokens()
            return False

        self._set_tokens(tokens, grant_type="refresh_token")
        return True

    async def _token_request(self, data: dict[str, str]) -> dict[str, Any]:
        response = await self._http.post(self._endpoints["token_endpoint"], data=data)
        if response.status_code != 200:
            raise OIDCError(f"Token request failed: {_error_description(response)}")
        return response.json()

    @staticmethod
    def _parse(token: str) -> dict[str, Any]:
        try:
            return jwt.get_unverified_claims(token)
        except JWTError as e:
            raise OIDCError(f"Malformed token: {e}") from e

    def _set_tokens(self, tokens: dict[str, Any], grant_type: str) -> None:
        access_token = tokens.get("access_token")
        if not access_token:
            raise OIDCError("Token response carries no access_token")

        self.token_parsed = self._parse(access_token)
        self.token = access_token
        self.refresh_token = tokens.get("refresh_token", self.refresh_token)
        self.id_token = tokens.get("id_token", self.id_token)
        self.subject = self.token_parsed.get("sub")
        self.authenticated = True
        self._probe.tokens_received(self.subject, grant_type)
