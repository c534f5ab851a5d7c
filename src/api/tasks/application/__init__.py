"""Application layer for the Tasks bounded context."""
