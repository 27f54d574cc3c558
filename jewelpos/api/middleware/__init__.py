"""API middleware."""

from jewelpos.api.middleware.error_handler import ErrorHandlerMiddleware
from jewelpos.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
