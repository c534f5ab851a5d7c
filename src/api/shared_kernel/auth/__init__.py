"""Bearer token validation shared by the API's authentication dependencies."""

from shared_kernel.auth.jwt_validator import (
    InvalidTokenError,
    JWKSCache,
    JWTValidator,
    TokenClaims,
)
from shared_kernel.auth.observability import (
    DefaultJWTValidatorProbe,
    JWTValidatorProbe,
)

__all__ = [
    "DefaultJWTValidatorProbe",
    "InvalidTokenError",
    "JWKSCache",
    "JWTValidator",
    "JWTValidatorProbe",
    "TokenClaims",
]
