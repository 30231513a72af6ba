"""API routers for the dashboard plugins API hub."""

from plugin_hub.api.routers import auth_router, math_router

__all__ = [
    "auth_router",
    "math_router",
]
