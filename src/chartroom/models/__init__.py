# src/chartroom/models/__init__.py
"""SQLAlchemy models for the Chartroom application."""

from .artist_image import ArtistImage, ArtistImageReport, ArtistImageVote
from .group import Group, GroupChartEntry, GroupMember
from .user import User

__all__ = [
    "ArtistImage", "ArtistImageReport", "ArtistImageVote",
    "Group", "GroupChartEntry", "GroupMember",
    "User",
]
