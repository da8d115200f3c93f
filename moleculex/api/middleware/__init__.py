"""API middleware."""

from moleculex.api.middleware.error_handler import ErrorHandlerMiddleware
from moleculex.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
