"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from iam.presentation import router as iam_router
from infrastructure.database.dependencies import (
    close_database_connections,
    create_schema,
)
from infrastructure.error_handlers import register_exception_handlers
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import (
    get_database_settings,
    get_oidc_settings,
    get_settings,
)
from infrastructure.version import __version__
from tasks.presentation import router as tasks_router

# Imported for their side effect of registering tables on Base.metadata.
import iam.infrastructure.models  # noqa: F401
import tasks.infrastructure.models  # noqa: F401


@asynccontextmanager
async def tasks_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Schema creation when TASKS_DB_CREATE_SCHEMA is enabled
    - Engine lifecycle (created lazily, disposed on shutdown)
    """
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    probe = DefaultStartupProbe()
    probe.application_starting(
        version=__version__,
        issuer_url=get_oidc_settings().issuer_url,
    )

    if get_database_settings().create_schema:
        await create_schema()

    yield

    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title="Tasks API",
    description="Multi-tenant task management",
    version=__version__,
    lifespan=tasks_lifespan,
)

register_exception_handlers(app)

app.include_router(iam_router)
app.include_router(tasks_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
