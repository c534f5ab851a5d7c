"""Tasks bounded context.

Owns the tenant-scoped task resource: each task belongs to one tenant and
is visible only to the user who created it.
"""
