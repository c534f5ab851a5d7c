"""Shared middleware for cross-cutting concerns.

Holds the tenant context value object that the IAM bounded context resolves
for each request and the other bounded contexts consume.
"""
