# src/chartroom/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import artist_images_router, search_router

__all__ = [
    "artist_images_router",
    "search_router",
]
