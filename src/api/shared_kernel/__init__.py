"""Code every bounded context may depend on.

Bearer token validation, the per-request tenant context and the probe base
classes. Nothing here imports from ``iam``, ``tasks`` or ``webclient``.
"""
