# src/unitea_functions/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import comments_router, posts_router, users_router

API_PREFIX = "/api/v1"

__all__ = [
    "API_PREFIX",
    "comments_router",
    "posts_router",
    "users_router",
]
