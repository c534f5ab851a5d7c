"""Error bodies returned by the Tasks API and their client-side handling.

The API answers failures in one of two shapes:

* a message body, ``{"message": "..."}``;
* a validation body, ``{"success": false, "error": ...}`` where ``error`` is
  a plain message or a collection of field issues.

Bodies are decoded once into a tagged union so call sites branch on a type
instead of probing keys.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class ApiError(Exception):
    """Raised for every error body the API returns.

    Attributes:
        message: Human-readable description, ready to show to a user.
        status_code: HTTP status of the response, when known.
        body: The decoded JSON body, when there was one.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class SuccessBody:
    """A body carrying neither error discriminator."""

    data: Any


@dataclass(frozen=True)
class MessageErrorBody:
    """A ``{"message": ...}`` error body."""

    message: str


@dataclass(frozen=True)
class ValidationErrorBody:
    """A ``{"success": false, "error": ...}`` error body."""

    raw: Mapping[str, Any]

    @property
    def message(self) -> str:
        """The body rendered by format_api_error."""
        return format_api_error(self.raw)


ResponseBody = SuccessBody | MessageErrorBody | ValidationErrorBody


def decode_body(body: Any) -> ResponseBody:
    """Classify a decoded JSON body.

    ``message`` takes precedence over ``success`` when both are present.
    Anything that is not a mapping is a success payload (lists, for example).
    """
    if isinstance(body, Mapping):
        if "message" in body:
            return MessageErrorBody(message=str(body["message"]))
        if "success" in body:
            return ValidationErrorBody(raw=body)
    return SuccessBody(data=body)


def _format_issue(issue: Any) -> str | None:
    if isinstance(issue, str):
        return issue
    if not isinstance(issue, Mapping):
        return None

    message = issue.get("message")
    if message is None:
        return None

    path = issue.get("path") or []
    if isinstance(path, str):
        path = [path]
    dotted = ".".join(str(part) for part in path)
    return f"{dotted}: {message}" if dotted else str(message)


def format_api_error(body: Any) -> str:
    """Render a validation error body as one human-readable string.

    Never raises. Unrecognized shapes produce ``GENERIC_ERROR_MESSAGE``.

    Examples:
        {"success": False, "error": "name required"} -> "name required"
        {"success": False, "error": {"issues": [
            {"path": ["name"], "message": "Required"}]}} -> "name: Required"
    """
    if not isinstance(body, Mapping):
        return GENERIC_ERROR_MESSAGE

    error = body.get("error")

    if isinstance(error, str):
        return error or GENERIC_ERROR_MESSAGE

    issues: Any = None
    if isinstance(error, Mapping):
        issues = error.get("issues")
        if issues is None and isinstance(error.get("message"), str):
            return error["message"] or GENERIC_ERROR_MESSAGE
    elif isinstance(error, list):
        issues = error

    if isinstance(issues, list):
        lines = [line for line in map(_format_issue, issues) if line]
        if lines:
            return "\n".join(lines)

    return GENERIC_ERROR_MESSAGE


def error_from_body(body: Any, status_code: int | None = None) -> ApiError:
    """Build the ApiError for a body already known to signal failure.

    A message body is raised verbatim; anything else goes through
    format_api_error.
    """
    decoded = decode_body(body)
    if isinstance(decoded, MessageErrorBody):
        return ApiError(decoded.message, status_code=status_code, body=body)
    return ApiError(format_api_error(body), status_code=status_code, body=body)
