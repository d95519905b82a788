# src/chartroom/models/artist_image.py
"""Models for crowd-sourced artist images, their votes and reports."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chartroom.db.session import Base

from .user import User

VOTE_UP = "up"
VOTE_DOWN = "down"
VOTE_TYPES = (VOTE_UP, VOTE_DOWN)

REPORT_STATUS_PENDING = "pending"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ArtistImage(Base):
    """Candidate picture for an artist, keyed by the normalized artist name."""

    __tablename__ = "artist_image"
    __table_args__ = (Index("ix_artist_image_artist_name", "artist_name"),)

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    artist_name: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    uploaded_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id"),
        nullable=False,
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    uploader: Mapped[User] = relationship("User", lazy="joined")


class ArtistImageVote(Base):
    """Per-user vote on an artist image."""

    __tablename__ = "artist_image_vote"
    __table_args__ = (
        CheckConstraint("vote_type IN ('up', 'down')", name="ck_artist_image_vote_type"),
        Index("ix_artist_image_vote_image_id", "image_id"),
    )

    # Composite primary key prevents duplicate votes from the same user.
    image_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("artist_image.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    vote_type: Mapped[str] = mapped_column(String(4), nullable=False)


class ArtistImageReport(Base):
    """A user's complaint about an artist image, awaiting review."""

    __tablename__ = "artist_image_report"
    __table_args__ = (
        UniqueConstraint("image_id", "reported_by", name="uq_artist_image_report_reporter"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    image_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("artist_image.id", ondelete="CASCADE"),
        nullable=False,
    )
    reported_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=REPORT_STATUS_PENDING
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
