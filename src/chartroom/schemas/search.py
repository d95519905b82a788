"""Chart search Pydantic schemas."""

from pydantic import BaseModel, Field


class ArtistHit(BaseModel):
    """Canonical artist entry matched by a search."""

    entry_key: str
    name: str
    slug: str | None = None


class ReleaseHit(BaseModel):
    """Canonical track or album entry matched by a search."""

    entry_key: str
    name: str
    artist: str | None = None
    slug: str | None = None


class SearchResults(BaseModel):
    """Search hits partitioned by chart type, each bucket sorted by name."""

    artists: list[ArtistHit] = Field(default_factory=list)
    tracks: list[ReleaseHit] = Field(default_factory=list)
    albums: list[ReleaseHit] = Field(default_factory=list)
