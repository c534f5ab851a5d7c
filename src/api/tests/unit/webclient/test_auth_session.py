"""Unit tests for the process-wide auth session."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from infrastructure.settings import OIDCSettings, WebClientSettings
from webclient.auth import AuthSession, InitOptions, OIDCClient, get_auth_session
from webclient.observability import AuthFlowProbe


@pytest.fixture
def mock_client() -> MagicMock:
    """OIDCClient double whose handshake reports success."""
    client = MagicMock(spec=OIDCClient)
    client.authenticated = False
    client.token = None

    async def init(options):
        client.authenticated = True
        client.token = "abc"
        return True

    client.init = AsyncMock(side_effect=init)
    client.logout = MagicMock(return_value="http://idp.test/logout")
    return client


@pytest.fixture
def factory(mock_client: MagicMock) -> MagicMock:
    """Client factory returning the mock client."""
    return MagicMock(return_value=mock_client)


@pytest.fixture
def session(
    oidc_settings: OIDCSettings,
    web_settings: WebClientSettings,
    factory: MagicMock,
) -> AuthSession:
    """Create an AuthSession with a mocked client."""
    return AuthSession(
        oidc_settings=oidc_settings,
        web_settings=web_settings,
        client_factory=factory,
        probe=MagicMock(spec=AuthFlowProbe),
    )


class TestGetClient:
    """Tests for lazy client construction."""

    def test_constructs_once(self, session: AuthSession, factory: MagicMock):
        """The same client is returned on every call."""
        first = session.get_client()
        second = session.get_client()

        assert first is second
        factory.assert_called_once()

    def test_not_constructed_until_needed(self, session: AuthSession, factory: MagicMock):
        """Creating the session does not create the client."""
        assert session.initialized is False
        assert session.authenticated is False
        factory.assert_not_called()

    def test_default_client_uses_settings(
        self, oidc_settings: OIDCSettings, web_settings: WebClientSettings
    ):
        """The default factory builds the client from the OIDC settings."""
        client = AuthSession(oidc_settings=oidc_settings, web_settings=web_settings).get_client()

        assert isinstance(client, OIDCClient)
        assert client.issuer_url == "http://localhost:8080/realms/contrack"
        assert client.client_id == "contrackapi"


class TestInitialize:
    """Tests for AuthSession.initialize()."""

    @pytest.mark.asyncio
    async def test_first_call_runs_handshake(
        self, session: AuthSession, mock_client: MagicMock
    ):
        """The first call delegates to the client."""
        assert await session.initialize() is True
        assert session.initialized is True
        assert session.authenticated is True
        assert session.token == "abc"
        mock_client.init.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_repeat_call_never_reruns_handshake(
        self, session: AuthSession, mock_client: MagicMock
    ):
        """Later calls report the observed status without a new handshake."""
        first = await session.initialize()
        second = await session.initialize()

        assert first is second is True
        mock_client.init.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_repeat_call_reports_anonymous(
        self, session: AuthSession, mock_client: MagicMock
    ):
        """A signed-out first result is repeated as False."""
        mock_client.init = AsyncMock(return_value=False)

        assert await session.initialize() is False
        assert await session.initialize() is False
        mock_client.init.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_one_handshake(
        self, session: AuthSession, mock_client: MagicMock
    ):
        """The flag is set before awaiting, so a racing call does not start another."""
        release = asyncio.Event()

        async def slow_init(options):
            await release.wait()
            return True

        mock_client.init = AsyncMock(side_effect=slow_init)

        first = asyncio.create_task(session.initialize())
        await asyncio.sleep(0)
        second = await session.initialize()
        release.set()
        await first

        assert session.initialized is True
        assert second is False
        mock_client.init.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_default_options(self, session: AuthSession, mock_client: MagicMock):
        """check-sso with S256 and the silent SSO page of the origin."""
        await session.initialize()

        options: InitOptions = mock_client.init.await_args.args[0]
        assert options.on_load == "check-sso"
        assert options.pkce_method == "S256"
        assert options.check_login_iframe is False
        assert options.silent_check_sso_redirect_uri == (
            "http://acme.tasks.example.com/silent-check-sso.html"
        )

    @pytest.mark.asyncio
    async def test_failures_propagate(self, session: AuthSession, mock_client: MagicMock):
        """A failing handshake raises unchanged."""
        mock_client.init = AsyncMock(side_effect=RuntimeError("idp down"))

        with pytest.raises(RuntimeError, match="idp down"):
            await session.initialize()


class TestLogout:
    """Tests for AuthSession.logout()."""

    def test_redirects_to_app_origin(self, session: AuthSession, mock_client: MagicMock):
        """The end-session URL returns the user to the application."""
        assert session.logout() == "http://idp.test/logout"
        mock_client.logout.assert_called_once_with(
            redirect_uri="http://acme.tasks.example.com"
        )


def test_get_auth_session_is_process_wide():
    """The accessor returns one instance."""
    assert get_auth_session() is get_auth_session()
