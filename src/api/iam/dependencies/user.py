"""Authenticated user dependency.

Validates the bearer token on every request and exposes the caller's
identity to routes that need authentication but no tenant scope.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from iam.application.observability import AuthenticationProbe
from iam.application.value_objects import AuthenticatedUser
from iam.dependencies.authentication import (
    JWTValidator,
    get_authentication_probe,
    get_jwt_validator,
    oauth2_scheme,
)
from iam.domain.value_objects import UserId
from shared_kernel.auth import InvalidTokenError


async def get_authenticated_user(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    auth_probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
    token: Annotated[str | None, Depends(oauth2_scheme)] = None,
) -> AuthenticatedUser:
    """Resolve the caller from the bearer token.

    Any missing or rejected token is a 401 carrying a ``WWW-Authenticate``
    challenge. FastAPI resolves this once per request, so the tenant
    dependency and the route see the same user.
    """
    if token is None:
        auth_probe.authentication_failed(reason="Missing authorization")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = await validator.validate_token(token)
    except InvalidTokenError as e:
        auth_probe.authentication_failed(reason=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    username = claims.preferred_username or claims.sub
    auth_probe.user_authenticated(user_id=claims.sub, username=username)

    return AuthenticatedUser(
        user_id=UserId(value=claims.sub),
        username=username,
        email=claims.email,
    )
