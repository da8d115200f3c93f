"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from moleculex.application.dto.responses import ErrorResponse
from moleculex.config import get_logger
from moleculex.core.exceptions import (
    ConfigurationError,
    EntityNotFoundError,
    MappingError,
    MoleculeXError,
    RemoteReadError,
    RemoteWriteError,
    SnapshotError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    EntityNotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    SnapshotError: status.HTTP_400_BAD_REQUEST,
    RemoteWriteError: status.HTTP_502_BAD_GATEWAY,
    RemoteReadError: status.HTTP_502_BAD_GATEWAY,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    MappingError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
    KeyError: status.HTTP_404_NOT_FOUND,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "ENTITY_NOT_FOUND": "Check the ID and list the collection to see available entries.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "SNAPSHOT_PARSE_ERROR": "The backup file is invalid. Nothing was imported.",
    "REMOTE_WRITE_FAILED": "The change is kept locally. Save again once the store is reachable.",
    "REMOTE_READ_FAILED": "The remote store could not be read. Retry later.",
    "MISSING_FIELD": "The remote store returned an incomplete row. Check the schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
    "KeyError": "The requested key was not found.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    502: "The remote store failed. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _detail_for(exc: Exception) -> str | None:
    """Flatten domain error details (relation, entity id, field) into one line."""
    if isinstance(exc, MoleculeXError) and exc.details:
        return ", ".join(f"{key}={value}" for key, value in exc.details.items())
    return None


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Render an exception as an ErrorResponse; 5xx are logged as errors with traceback."""
    status_code = _status_for(exc)
    if isinstance(exc, MoleculeXError):
        error_code, message = exc.code, exc.message
    else:
        error_code, message = exc.__class__.__name__, str(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_exception",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        status=status_code,
        error_code=error_code,
        error=message,
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        detail=_detail_for(exc),
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escaped the route handlers to JSON responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(MoleculeXError)
    async def domain_exception_handler(request: Request, exc: MoleculeXError) -> JSONResponse:
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )
