"""Client session layer for the Tasks API.

Authenticates against the identity provider, resolves which tenant the
user is working in, and reads and writes that tenant's tasks through a
key-scoped query cache.
"""
