"""Infrastructure layer for the Tasks bounded context."""
