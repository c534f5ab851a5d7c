"""FastAPI dependencies for the Tasks bounded context."""
