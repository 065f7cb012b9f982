# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the CloseShop API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import CloseShopException, closeshop_exception_handler
from app.routers import admin, geocode, health, hooks, notifications
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs startup configuration and shutdown.
    """
    logger.info(f"Starting CloseShop API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.FCM_SERVER_KEY:
        logger.warning("FCM_SERVER_KEY is not set, push notifications will be dropped")

    yield

    logger.info("Shutting down CloseShop API")


# Create FastAPI application
app = FastAPI(
    title="CloseShop API",
    description="""
## Marketplace Backend

Server side of the CloseShop marketplace. Authentication, tables and
realtime are served by Supabase directly; this API adds:

| Area | Purpose |
|------|---------|
| **Auth** | Verify Supabase access tokens, return the caller's profile |
| **Notifications** | Read the caller's notifications |
| **Admin** | Dashboard data for admin profiles |
| **Hooks** | Database webhook that triggers push notifications |
| **Geocoding** | Proxy to the public geocoder |
""",
    version=health.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Verify JWT tokens and fetch the current profile"},
        {"name": "Notifications", "description": "Current user's notifications"},
        {"name": "Admin", "description": "Admin dashboard (admin role only)"},
        {"name": "Hooks", "description": "Supabase database webhooks"},
        {"name": "Geocoding", "description": "Geocoding proxy"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(CloseShopException)
async def handle_closeshop_exception(request: Request, exc: CloseShopException):
    """Handle custom CloseShop exceptions."""
    return await closeshop_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(notifications.router, prefix="/api/v1/notifications", tags=["Notifications"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])
app.include_router(hooks.router, prefix="/api/v1/hooks", tags=["Hooks"])

# The geocoding proxy keeps the unversioned paths the web client calls
app.include_router(geocode.router, prefix="/api", tags=["Geocoding"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "CloseShop API",
        "version": health.VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
