"""Application error taxonomy and the JSON error handlers.

Every error leaving the API is a JSON object with a single ``error`` string.
Internal causes are logged server-side and never echoed to the client.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("lph.errors")


class AppError(Exception):
    """Base exception for errors with a client-facing message."""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ProviderUnconfiguredError(AppError):
    """No enabled + active AI config."""
    status_code = 503

    def __init__(
        self,
        message: str = "AI service not configured. "
                       "Please configure and activate an AI provider in settings.",
    ):
        super().__init__(message)


class UpstreamProviderError(AppError):
    """The AI provider call failed or returned a non-2xx status."""
    status_code = 500


class AliasNameTakenError(AppError):
    """Another alias already uses this name."""
    status_code = 409

    def __init__(self, name: str):
        self.name = name
        super().__init__("Alias with this name already exists")


class StoreCorruptedError(AppError):
    """A JSON document exists on disk but cannot be parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__("Internal server error")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %r", request.method, request.url.path, exc)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(400, _describe_validation(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unexpected error in %s %s: %s",
            request.method, request.url.path, exc, exc_info=exc,
        )
        return _error(500, "Internal server error")
