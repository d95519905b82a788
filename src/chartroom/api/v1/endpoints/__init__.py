# src/chartroom/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .artist_images import router as artist_images_router
from .search import router as search_router

__all__ = [
    "artist_images_router",
    "search_router",
]
