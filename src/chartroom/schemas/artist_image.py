"""Artist image Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

VoteType = Literal["up", "down"]


class VoteCreate(BaseModel):
    """Schema for casting or changing a vote on an image."""

    vote_type: VoteType = Field(..., description='"up" or "down"')


class VoteResult(BaseModel):
    """Tallies for an image after a vote has been written."""

    upvotes: int
    downvotes: int
    score: int
    user_vote: VoteType


class UploaderInfo(BaseModel):
    """Public profile fields of the user who uploaded an image."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None
    lastfm_username: str


class GalleryImage(BaseModel):
    """One image of an artist gallery in ranked order."""

    id: str
    image_url: str
    uploaded_by: str
    uploaded_by_user: UploaderInfo | None
    uploaded_at: datetime
    upvotes: int
    downvotes: int
    score: int
    user_vote: VoteType | None = None


class GalleryResponse(BaseModel):
    images: list[GalleryImage]


class SelectedImageResponse(BaseModel):
    """The currently selected image, or null when none qualifies."""

    image_url: str | None


class ReportCreate(BaseModel):
    """Schema for reporting an image."""

    reason: str | None = Field(None, max_length=1000)


class ReportResponse(BaseModel):
    id: str
    message: str = "Image reported successfully"


class UploadResponse(BaseModel):
    id: str
    image_url: str
    message: str = "Image uploaded successfully"
