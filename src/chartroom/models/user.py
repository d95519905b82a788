# src/chartroom/models/user.py
"""SQLAlchemy model for application users."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chartroom.db.session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Account linked to a Last.fm profile.

    Superusers may remove any artist image regardless of who uploaded it.
    """

    __tablename__ = "app_user"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    lastfm_username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    is_superuser: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
