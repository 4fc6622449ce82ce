"""API routers."""
from .dashboard import router as dashboard_router
from .status import router as status_router

__all__ = ["dashboard_router", "status_router"]
