"""Authentication for the client session layer."""

from webclient.auth.oidc_client import (
    InitOptions,
    LoginRequiredError,
    OIDCClient,
    OIDCError,
)
from webclient.auth.session import AuthSession, get_auth_session

__all__ = [
    "AuthSession",
    "InitOptions",
    "LoginRequiredError",
    "OIDCClient",
    "OIDCError",
    "get_auth_session",
]
