"""HTTP routers: public site, admin dashboard, JSON API."""

from app.routes.admin import router as admin_router
from app.routes.api import router as api_router
from app.routes.public import router as public_router

__all__ = ["admin_router", "api_router", "public_router"]
