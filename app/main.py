"""
FastAPI Application Entry Point

Spice Heritage - restaurant website and admin dashboard.
Supports both Mock services (development) and hosted backends (staging/production).

Endpoints:
    - GET /: Public restaurant site
    - POST /reservations, POST /contact: Public forms
    - GET /admin: Live admin dashboard (session protected)
    - POST /api/orders: Order creation
    - GET /api/admin/{collection}: Filtered collection listing
    - GET /health: System health check

Author: Spice Heritage Engineering
Version: 1.0.0
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Internal imports
from app.core.config import get_settings, setup_logging
from app.core.security import AdminLoginRequired
from app.database import dispose_engine, init_db
from app.routes import admin_router, api_router, public_router
from app.schemas import HealthResponse
from app.services.realtime import BaseRealtimeDatabase, get_realtime_db
from app.services.storage import BaseStorageService, get_storage_service

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🍛 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    # Initialize database
    if settings.use_real_services:
        await init_db()
        logger.info("✅ Database initialized")

    # Log service configuration
    realtime_db = get_realtime_db()
    storage = get_storage_service()
    logger.info(f"✅ Realtime DB: {realtime_db.provider_name}")
    logger.info(f"✅ Storage Service: {storage.provider_name}")

    # Validate production config
    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await realtime_db.close()
    await dispose_engine()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Restaurant website with table reservations and a contact form, plus a "
        "live admin dashboard for menu, reservations, orders, messages and gallery."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Uploaded media is served by the app only when stored on local disk
if settings.is_development:
    app.mount(
        settings.media_url,
        StaticFiles(directory=settings.media_directory, check_dir=False),
        name="media",
    )

app.include_router(public_router)
app.include_router(admin_router)
app.include_router(api_router)


# =============================================================================
# HEALTH ENDPOINT
# =============================================================================

@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: BaseRealtimeDatabase = Depends(get_realtime_db),
    storage: BaseStorageService = Depends(get_storage_service),
) -> HealthResponse:
    """Verify the realtime database and object storage are reachable."""

    db_status = "healthy"
    try:
        if not await db.health_check():
            db_status = "unhealthy"
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Realtime DB health check failed: {e}")

    storage_status = "healthy"
    try:
        if not await storage.health_check():
            storage_status = "unhealthy"
    except Exception as e:
        storage_status = f"unhealthy: {str(e)}"
        logger.error(f"Storage health check failed: {e}")

    overall = "operational" if all(
        s == "healthy" for s in [db_status, storage_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        realtime_database=db_status,
        storage=storage_status,
        timestamp=datetime.now(),
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(AdminLoginRequired)
async def admin_login_handler(request: Request, exc: AdminLoginRequired):
    """Send unauthenticated admin requests to the login page (401 for the API)."""
    if request.url.path.startswith("/api/"):
        return JSONResponse(
            status_code=401,
            content={"success": False, "error": "Unauthorized", "detail": exc.reason},
        )

    url = "/admin/login"
    if exc.reason == "session expired":
        url += "?toast=login_required"
    return RedirectResponse(url, status_code=303)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )
