"""Domain exceptions for IAM bounded context.

These exceptions represent domain-level errors that can occur during
repository operations and tenant resolution. They are caught and
translated to HTTP responses by the presentation layer.
"""


class DuplicateTenantSlugError(Exception):
    """Raised when attempting to create a tenant with a slug that already exists.

    Tenant slugs are globally unique because they double as subdomain labels.
    """

    pass


class TenantNotFoundError(Exception):
    """Raised when a tenant id or slug does not match any tenant."""

    pass


class TenantAccessDeniedError(Exception):
    """Raised when a user has no active membership in an active tenant.

    The presentation layer maps this to HTTP 403 without revealing whether
    the tenant is suspended or the membership is missing.
    """

    pass
