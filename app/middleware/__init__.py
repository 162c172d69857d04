"""
Middleware package for security and request processing
"""
from .security import SecurityHeadersMiddleware
from .request_logging import RequestLoggingMiddleware

__all__ = [
    "SecurityHeadersMiddleware",
    "RequestLoggingMiddleware",
]
