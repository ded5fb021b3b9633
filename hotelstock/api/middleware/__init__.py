"""API middleware."""

from hotelstock.api.middleware.error_handler import ErrorHandlerMiddleware
from hotelstock.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
