# src/chartroom/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .artist_image import (
    GalleryImage,
    GalleryResponse,
    ReportCreate,
    ReportResponse,
    SelectedImageResponse,
    UploaderInfo,
    UploadResponse,
    VoteCreate,
    VoteResult,
)
from .search import ArtistHit, ReleaseHit, SearchResults

__all__ = [
    "GalleryImage", "GalleryResponse",
    "ReportCreate", "ReportResponse",
    "SelectedImageResponse",
    "UploaderInfo", "UploadResponse",
    "VoteCreate", "VoteResult",
    "ArtistHit", "ReleaseHit", "SearchResults",
]
