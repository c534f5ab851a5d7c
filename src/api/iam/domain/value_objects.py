"""Value objects for IAM domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

_SLUG_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,98}[a-z0-9])?$")


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        Accepts lowercase input (Crockford Base32 is case-insensitive) and
        stores the canonical uppercase form.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            parsed = ULID.from_str(value.upper())
        except ValueError as e:
            raise ValueError(f"Invalid TenantId: {value}") from e

        return cls(value=str(parsed))

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Return True when value parses as a ULID."""
        try:
            cls.from_string(value)
        except ValueError:
            return False
        return True


@dataclass(frozen=True)
class UserId:
    """Identifier for a user, as issued by the identity provider.

    The identity provider owns the format (typically a UUID in the ``sub``
    claim), so no structural validation is applied beyond non-emptiness.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("UserId must not be empty")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class TenantSlug:
    """Externally visible routing key of a tenant (its subdomain label)."""

    value: str

    def __post_init__(self) -> None:
        if not _SLUG_PATTERN.match(self.value):
            raise ValueError(
                f"Invalid tenant slug '{self.value}': use lowercase letters, "
                "digits and inner hyphens (max 100 characters)"
            )

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


class TenantPlan(StrEnum):
    """Commercial plan a tenant is on."""

    ENTERPRISE = "enterprise"
    STANDARD = "standard"
    STARTER = "starter"
    TRIAL = "trial"


class TenantStatus(StrEnum):
    """Lifecycle status of a tenant. Only active tenants are usable."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"
    PENDING = "pending"


class TenantRole(StrEnum):
    """Role of a user within a tenant."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class MembershipStatus(StrEnum):
    """Status of a user's membership in a tenant."""

    ACTIVE = "active"
    INVITED = "invited"
    SUSPENDED = "suspended"
