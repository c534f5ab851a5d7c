"""Bearer authentication wiring for the IAM routes.

The security scheme extracts the bearer token and drives Swagger UI's
Authorize button. The validator is built once per process so its JWKS
cache is shared by all requests.
"""

from functools import lru_cache

from fastapi.security import OAuth2AuthorizationCodeBearer

from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from infrastructure.settings import OIDCSettings, get_oidc_settings
from shared_kernel.auth import JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe, JWTValidatorProbe

OIDC_SCOPES = {
    "openid": "OpenID Connect",
    "profile": "User profile",
    "email": "User email",
}


def build_oauth2_scheme(settings: OIDCSettings) -> OAuth2AuthorizationCodeBearer:
    """Authorization code flow against the realm's OIDC endpoints.

    With ``auto_error`` off a missing header yields ``None`` and
    get_authenticated_user answers with the API's own 401 body.
    """
    endpoints = f"{settings.issuer_url}/protocol/openid-connect"
    return OAuth2AuthorizationCodeBearer(
        authorizationUrl=f"{endpoints}/auth",
        tokenUrl=f"{endpoints}/token",
        refreshUrl=f"{endpoints}/token",
        scopes=OIDC_SCOPES,
        auto_error=False,
    )


oauth2_scheme = build_oauth2_scheme(get_oidc_settings())


def build_jwt_validator(
    settings: OIDCSettings, probe: JWTValidatorProbe | None = None
) -> JWTValidator:
    """Validator accepting tokens the realm issued to this API's client."""
    return JWTValidator(
        issuer_url=settings.issuer_url,
        audience=settings.audience,
        probe=probe or DefaultJWTValidatorProbe(),
        authorized_party=settings.client_id,
        user_id_claim=settings.user_id_claim,
        username_claim=settings.username_claim,
    )


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get the process-wide JWTValidator."""
    return build_jwt_validator(get_oidc_settings())


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance."""
    return DefaultAuthenticationProbe()
