"""artist images and group charts

Revision ID: 3c9e1a7b52d4
Revises:
Create Date: 2026-10-17 09:12:41.318204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c9e1a7b52d4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, groups, chart entries and artist image tables."""
    op.create_table(
        "app_user",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("lastfm_username", sa.String(length=64), nullable=False),
        sa.Column("is_superuser", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("lastfm_username"),
    )
    op.create_table(
        "chart_group",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "group_member",
        sa.Column("group_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(["group_id"], ["chart_group.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("group_id", "user_id"),
    )
    op.create_table(
        "group_chart_entry",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("group_id", sa.String(length=36), nullable=False),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("chart_type", sa.String(length=16), nullable=False),
        sa.Column("entry_key", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("artist", sa.Text(), nullable=True),
        sa.Column("slug", sa.Text(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("playcount", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "chart_type IN ('artists', 'tracks', 'albums')",
            name="ck_group_chart_entry_chart_type",
        ),
        sa.ForeignKeyConstraint(["group_id"], ["chart_group.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_group_chart_entry_group_week", "group_chart_entry", ["group_id", "week_start"]
    )
    op.create_index("ix_group_chart_entry_type_slug", "group_chart_entry", ["chart_type", "slug"])
    op.create_table(
        "artist_image",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("artist_name", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("uploaded_by", sa.String(length=36), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["uploaded_by"], ["app_user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_artist_image_artist_name", "artist_image", ["artist_name"])
    op.create_table(
        "artist_image_vote",
        sa.Column("image_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("vote_type", sa.String(length=4), nullable=False),
        sa.CheckConstraint("vote_type IN ('up', 'down')", name="ck_artist_image_vote_type"),
        sa.ForeignKeyConstraint(["image_id"], ["artist_image.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("image_id", "user_id"),
    )
    op.create_index("ix_artist_image_vote_image_id", "artist_image_vote", ["image_id"])
    op.create_table(
        "artist_image_report",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("image_id", sa.String(length=36), nullable=False),
        sa.Column("reported_by", sa.String(length=36), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["image_id"], ["artist_image.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reported_by"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("image_id", "reported_by", name="uq_artist_image_report_reporter"),
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table("artist_image_report")
    op.drop_index("ix_artist_image_vote_image_id", table_name="artist_image_vote")
    op.drop_table("artist_image_vote")
    op.drop_index("ix_artist_image_artist_name", table_name="artist_image")
    op.drop_table("artist_image")
    op.drop_index("ix_group_chart_entry_type_slug", table_name="group_chart_entry")
    op.drop_index("ix_group_chart_entry_group_week", table_name="group_chart_entry")
    op.drop_table("group_chart_entry")
    op.drop_table("group_member")
    op.drop_table("chart_group")
    op.drop_table("app_user")
