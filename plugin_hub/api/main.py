"""
FastAPI application for the dashboard plugins API hub.

Provides REST API for:
- Exchanging dashboard Supabase tokens for API access tokens
- Math plugin standards, modules and topics
- Practice history and per-standard mastery
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from config import get_settings
from plugin_hub import __version__
from plugin_hub.core.errors import GatewayError
from plugin_hub.core.log import configure_logging
from plugin_hub.integrations.supabase_auth import SupabaseIdentityBridge
from plugin_hub.integrations.supabase_query import SupabaseQueryGateway

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the upstream clients on startup and close them on shutdown."""
    configure_logging(settings.log_level)
    logger.info("Starting dashboard plugins API hub...")

    dashboard = settings.get_dashboard_endpoint()
    math_endpoint = settings.get_math_endpoint()
    if not dashboard.is_configured:
        logger.warning("Dashboard Supabase is not configured; token exchange will fail")
    if not math_endpoint.is_configured:
        logger.warning("Math plugin Supabase is not configured; math routes will fail")
    if settings.uses_default_secret():
        logger.warning("JWT_SECRET is not set; using the development default")

    app.state.identity_bridge = SupabaseIdentityBridge(dashboard)
    app.state.math_gateway = SupabaseQueryGateway(math_endpoint)
    logger.info(f"Service started on {settings.api_host}:{settings.port} ({settings.environment})")

    yield

    logger.info("Shutting down dashboard plugins API hub...")
    await app.state.identity_bridge.close()
    await app.state.math_gateway.close()


app = FastAPI(
    title="Dashboard Plugins API Hub",
    description="Authenticated gateway to dashboard plugin datasets.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Render gateway errors as ``{error, details?}``."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {
        "message": "Welcome to Dashboard Plugins API Hub",
        "status": "success",
        "version": __version__,
    }


@app.get("/health", tags=["Health"])
def health_check() -> dict[str, str]:
    """Liveness probe."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ========================================
# Import and mount routers
# ========================================

from plugin_hub.api.routers import auth_router, math_router  # noqa: E402

app.include_router(auth_router.router, prefix=f"{settings.api_prefix}/auth", tags=["Auth"])
app.include_router(math_router.router, prefix=f"{settings.api_prefix}/math", tags=["Math"])
