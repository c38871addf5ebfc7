"""
API Routes Module
"""
from .health import router as health_router
from .analytics import router as analytics_router
from .reports import router as reports_router

__all__ = [
    "health_router",
    "analytics_router",
    "reports_router",
]
