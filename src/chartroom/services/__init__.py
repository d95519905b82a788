# src/chartroom/services/__init__.py
"""Business logic services for the Chartroom application."""

from .artist_images import ArtistImageService
from .chart_search import deduplicate_chart_entries, search_chart_entries
from .normalization import generate_slug, normalize_artist_name
from .ranking import RankedImage, rank_images, select_image
from .scoring import VoteTally, calculate_image_score, tally_votes
from .storage import LocalImageStorage, get_image_storage

__all__ = [
    "ArtistImageService",
    "deduplicate_chart_entries", "search_chart_entries",
    "generate_slug", "normalize_artist_name",
    "RankedImage", "rank_images", "select_image",
    "VoteTally", "calculate_image_score", "tally_votes",
    "LocalImageStorage", "get_image_storage",
]
