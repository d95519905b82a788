"""Chartroom: community music charts with crowd-curated artist imagery."""

__version__ = "0.1.0"
