"""HTTP API: routers, dependencies and service wiring."""

from .endpoints import auth_router, users_router

__all__ = [
    "auth_router",
    "users_router",
]
