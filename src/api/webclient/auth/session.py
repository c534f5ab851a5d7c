"""Process-wide authentication session.

Owns the single OIDCClient of the process and guards its initialization:
the handshake runs at most once, and later calls report the current
authentication status instead of starting another handshake.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache

from infrastructure.settings import (
    OIDCSettings,
    WebClientSettings,
    get_oidc_settings,
    get_web_client_settings,
)
from webclient.auth.oidc_client import InitOptions, OIDCClient
from webclient.observability import AuthFlowProbe, DefaultAuthFlowProbe

ClientFactory = Callable[[OIDCSettings, WebClientSettings], OIDCClient]


def _default_client_factory(
    oidc: OIDCSettings, web: WebClientSettings
) -> OIDCClient:
    return OIDCClient(
        url=oidc.url,
        realm=oidc.realm,
        client_id=oidc.client_id,
        timeout=web.request_timeout_seconds,
    )


class AuthSession:
    """Wrapper owning construction and idempotent initialization of the client."""

    def __init__(
        self,
        oidc_settings: OIDCSettings | None = None,
        web_settings: WebClientSettings | None = None,
        client_factory: ClientFactory | None = None,
        probe: AuthFlowProbe | None = None,
    ):
        self._oidc_settings = oidc_settings or get_oidc_settings()
        self._web_settings = web_settings or get_web_client_settings()
        self._client_factory = client_factory or _default_client_factory
        self._probe = probe or DefaultAuthFlowProbe()
        self._client: OIDCClient | None = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        """True once initialize() has been called, even if still in progress."""
        return self._initialized

    @property
    def authenticated(self) -> bool:
        """Whether the client currently holds a session."""
        return self._client is not None and bool(self._client.authenticated)

    @property
    def token(self) -> str | None:
        """Current access token, if any."""
        if self._client is None or not self._client.authenticated:
            return None
        return self._client.token

    @property
    def app_origin(self) -> str:
        """Origin the application is served from."""
        return self._web_settings.app_origin.rstrip("/")

    def get_client(self) -> OIDCClient:
        """Return the shared client, constructing it on first use."""
        if self._client is None:
            self._client = self._client_factory(self._oidc_settings, self._web_settings)
        return self._client

    def default_init_options(self) -> InitOptions:
        """check-sso with PKCE S256 and the silent SSO page under the origin."""
        return InitOptions(
            on_load="check-sso",
            pkce_method="S256",
            silent_check_sso_redirect_uri=f"{self.app_origin}/silent-check-sso.html",
            check_login_iframe=False,
            redirect_uri=self.app_origin,
        )

    async def initialize(self, options: InitOptions | None = None) -> bool:
        """Run the handshake once; afterwards report the current status.

        The initialized flag is set before the handshake is awaited, so a
        concurrent second call never starts another handshake. Failures of
        the first handshake propagate unchanged.
        """
        client = self.get_client()
        if self._initialized:
            return bool(client.authenticated)

        self._initialized = True
        resolved = options or self.default_init_options()
        authenticated = await client.init(resolved)
        self._probe.session_initialized(authenticated, resolved.on_load)
        return authenticated

    def logout(self) -> str:
        """Clear the session and return the end-session URL.

        The identity provider redirects back to the application origin.
        """
        return self.get_client().logout(redirect_uri=self.app_origin)


@lru_cache
def get_auth_session() -> AuthSession:
    """Get the process-wide auth session.

    Consumers receive it by injection; this accessor is the composition root.
    """
    return AuthSession()
