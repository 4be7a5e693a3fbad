"""API route exports."""

from api.routes.accounts import router as accounts_router
from api.routes.analysis import router as analysis_router
from api.routes.health import router as health_router

__all__ = ["accounts_router", "analysis_router", "health_router"]
