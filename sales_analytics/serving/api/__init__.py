"""
API Module
"""
from .errors import internal_errors, register_exception_handlers
from .middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware

__all__ = [
    "internal_errors",
    "register_exception_handlers",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
