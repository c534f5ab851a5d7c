"""Domain layer for the Tasks bounded context."""
