# src/chartroom/models/group.py
"""Models for listening groups and their weekly chart rows."""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chartroom.db.session import Base

CHART_TYPE_ARTISTS = "artists"
CHART_TYPE_TRACKS = "tracks"
CHART_TYPE_ALBUMS = "albums"
CHART_TYPES = (CHART_TYPE_ARTISTS, CHART_TYPE_TRACKS, CHART_TYPE_ALBUMS)


class Group(Base):
    """A set of users whose scrobbles are charted together."""

    __tablename__ = "chart_group"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)


class GroupMember(Base):
    """Membership link between a user and a group."""

    __tablename__ = "group_member"

    group_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("chart_group.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )


class GroupChartEntry(Base):
    """One ranked row of a group's weekly chart.

    The same logical entry (``entry_key``) reappears every week it charts, so
    many rows exist per (group, chart_type, entry_key).
    """

    __tablename__ = "group_chart_entry"
    __table_args__ = (
        CheckConstraint(
            "chart_type IN ('artists', 'tracks', 'albums')",
            name="ck_group_chart_entry_chart_type",
        ),
        Index("ix_group_chart_entry_group_week", "group_id", "week_start"),
        Index("ix_group_chart_entry_type_slug", "chart_type", "slug"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("chart_group.id", ondelete="CASCADE"),
        nullable=False,
    )
    week_start: Mapped[date] = mapped_column(Date, nullable=False)
    chart_type: Mapped[str] = mapped_column(String(16), nullable=False)
    # Normalized key: "name" for artists, "name|artist" for tracks and albums.
    entry_key: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    artist: Mapped[str | None] = mapped_column(Text, nullable=True)
    slug: Mapped[str | None] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    playcount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
