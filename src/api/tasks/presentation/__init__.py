"""Tasks presentation layer."""

from tasks.presentation.routes import router

__all__ = ["router"]
