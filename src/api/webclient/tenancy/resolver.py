"""Derive the candidate tenant slug from the hostname."""

from __future__ import annotations

from urllib.parse import urlsplit


def resolve_tenant_slug(hostname: str | None) -> str | None:
    """Return the subdomain label of a hostname, or None.

    Hostnames with more than two dot-separated labels yield their first
    label: ``acme.tasks.example.com`` gives ``acme``. Bare domains,
    ``localhost`` and anything with two or fewer labels give None.
    """
    if not hostname:
        return None
    parts = hostname.split(".")
    if len(parts) > 2:
        return parts[0]
    return None


def hostname_from_origin(origin: str) -> str | None:
    """Extract the hostname (without port) from an origin URL."""
    return urlsplit(origin).hostname
