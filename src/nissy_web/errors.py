"""Gateway errors and their HTTP rendering."""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .models import ErrorResponse


class GatewayError(Exception):
    """Base error carrying the HTTP status it is reported with."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class InvalidInputError(GatewayError):
    """A free-text field contains characters outside the allow-list."""

    def __init__(self, message: str = "Invalid characters in input"):
        super().__init__(message)


class InvalidJSONError(GatewayError):
    def __init__(self, message: str = "Invalid JSON"):
        super().__init__(message)


class MissingFieldError(GatewayError):
    """One or more required body fields are empty or absent."""

    status_code = 400

    def __init__(self, *fields: str):
        self.fields = fields
        verb = "are" if len(fields) > 1 else "is"
        super().__init__(f"{' and '.join(fields)} {verb} required")


class ProcessTimeoutError(GatewayError):
    """The solver was killed after running past the configured timeout."""

    def __init__(self, message: str = "Process timed out"):
        super().__init__(message)


class ProcessError(GatewayError):
    """The solver failed without producing usable output."""


class NotFoundError(GatewayError):
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class MethodNotAllowedError(GatewayError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class ForbiddenPathError(GatewayError):
    """The requested static path resolves outside the public root."""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


def _render(request: Request, message: str, status_code: int) -> Response:
    if request.url.path.startswith("/api/"):
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=message).model_dump(),
        )
    return PlainTextResponse(message, status_code=status_code)


async def gateway_error_handler(request: Request, exc: GatewayError) -> Response:
    """Render API errors as ``{"error": ...}`` and static errors as plain text."""
    return _render(request, exc.message, exc.status_code)


async def generic_error_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected exceptions with a 500 in the same shape."""
    if request.url.path.startswith("/api/"):
        return _render(request, str(exc) or type(exc).__name__, 500)
    return _render(request, "Internal Server Error", 500)
