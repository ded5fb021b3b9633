"""API route modules."""

from hotelstock.api.routes.health import router as health_router
from hotelstock.api.routes.reports import router as reports_router

__all__ = [
    "health_router",
    "reports_router",
]
