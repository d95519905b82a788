"""Data access helpers for groups and their chart entries."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from chartroom.models.group import CHART_TYPE_ARTISTS, Group, GroupChartEntry, GroupMember

__all__ = ["ChartEntryRepository"]


class ChartEntryRepository:
    """Thin wrapper around database access for chart entries."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_group(self, group_id: str) -> Group | None:
        """Return a group by identifier."""
        return self.session.get(Group, group_id)

    def is_member(self, group_id: str, user_id: str) -> bool:
        """Return True when the user belongs to the group."""
        return self.session.get(GroupMember, (group_id, user_id)) is not None

    def search_by_name(self, group_id: str, term: str) -> list[GroupChartEntry]:
        """Return a group's rows whose name may contain ``term``, newest week first.

        SQLite folds only ASCII letters in ``lower()`` and ``LIKE``, so on that
        dialect every row of the group is returned and callers filter by name.
        """
        stmt = select(GroupChartEntry).where(GroupChartEntry.group_id == group_id)
        if self.session.get_bind().dialect.name != "sqlite":
            stmt = stmt.where(GroupChartEntry.name.icontains(term, autoescape=True))
        result = self.session.execute(stmt.order_by(GroupChartEntry.week_start.desc()))
        return list(result.scalars())

    def latest_artist_key_for_slug(self, slug: str) -> str | None:
        """Return the entry key of the most recent artist row carrying ``slug``."""
        result = self.session.execute(
            select(GroupChartEntry.entry_key)
            .where(
                GroupChartEntry.chart_type == CHART_TYPE_ARTISTS,
                GroupChartEntry.slug == slug,
            )
            .order_by(GroupChartEntry.week_start.desc())
            .limit(1)
        )
        return result.scalars().first()
