"""Exception handlers that give every error response a stable JSON shape.

Two shapes are produced:

* ``{"message": "..."}`` for any ``HTTPException``.
* ``{"success": false, "error": {"issues": [...], "name": "ValidationError"}}``
  for request validation failures, with status 422.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()

# Leading loc entry FastAPI adds to say where a value came from.
_LOCATIONS = {"body", "path", "query", "header", "cookie"}


def validation_issues(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert pydantic error dicts into issue records.

    Each issue carries the error ``code``, the ``path`` inside the request
    part that failed (without the leading location) and a ``message``.
    """
    issues = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in _LOCATIONS:
            loc = loc[1:]
        issues.append(
            {
                "code": error.get("type", "invalid"),
                "path": loc,
                "message": error.get("msg", ""),
            }
        )
    return issues


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render an HTTPException as ``{"message": detail}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation errors as a 422 issue list."""
    issues = validation_issues(list(exc.errors()))
    logger.debug(
        "request_validation_failed",
        path=request.url.path,
        issue_count=len(issues),
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "error": {"issues": issues, "name": "ValidationError"},
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on the application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
