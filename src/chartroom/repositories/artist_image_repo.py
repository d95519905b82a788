"""Data access helpers for artist images, votes and reports."""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from chartroom.models.artist_image import (
    REPORT_STATUS_PENDING,
    ArtistImage,
    ArtistImageReport,
    ArtistImageVote,
)

__all__ = ["ArtistImageRepository", "UnsupportedDialectError"]

_UPSERT_INSERTS: dict[str, Callable] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UnsupportedDialectError(RuntimeError):
    """Raised when the bound database has no single-statement vote upsert."""


class ArtistImageRepository:
    """Thin wrapper around database access for artist image entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_image(self, image_id: str) -> ArtistImage | None:
        """Return an image by identifier."""
        return self.session.get(ArtistImage, image_id)

    def list_for_artist(self, artist_name: str) -> list[ArtistImage]:
        """Return every image stored under a normalized artist key, newest first."""
        result = self.session.execute(
            select(ArtistImage)
            .where(ArtistImage.artist_name == artist_name)
            .order_by(ArtistImage.uploaded_at.desc())
        )
        return list(result.scalars())

    def votes_for_images(self, image_ids: Sequence[str]) -> dict[str, list[ArtistImageVote]]:
        """Return the live votes for several images, grouped by image id."""
        grouped: dict[str, list[ArtistImageVote]] = defaultdict(list)
        if not image_ids:
            return grouped
        result = self.session.execute(
            select(ArtistImageVote)
            .where(ArtistImageVote.image_id.in_(image_ids))
            .execution_options(populate_existing=True)
        )
        for vote in result.scalars():
            grouped[vote.image_id].append(vote)
        return grouped

    def votes_for_image(self, image_id: str) -> list[ArtistImageVote]:
        """Return the live votes for a single image."""
        return self.votes_for_images([image_id]).get(image_id, [])

    def upsert_vote(self, *, image_id: str, user_id: str, vote_type: str) -> None:
        """Insert the user's vote or overwrite its direction in one statement.

        The (image_id, user_id) primary key is the conflict target, so a user
        can never hold two votes on the same image.
        """
        dialect_name = self.session.get_bind().dialect.name
        try:
            insert = _UPSERT_INSERTS[dialect_name]
        except KeyError as err:
            raise UnsupportedDialectError(
                f"Vote upsert is not supported on the {dialect_name!r} dialect"
            ) from err

        stmt = insert(ArtistImageVote).values(
            image_id=image_id,
            user_id=user_id,
            vote_type=vote_type,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ArtistImageVote.image_id, ArtistImageVote.user_id],
            set_={"vote_type": stmt.excluded.vote_type},
        )
        self.session.execute(stmt)

    def create_image(self, *, artist_name: str, image_url: str, uploaded_by: str) -> ArtistImage:
        """Insert a new image and return the persisted ORM instance."""
        image = ArtistImage(
            artist_name=artist_name,
            image_url=image_url,
            uploaded_by=uploaded_by,
        )
        self.session.add(image)
        self.session.flush()
        return image

    def find_report(self, image_id: str, reported_by: str) -> ArtistImageReport | None:
        """Return the report a user filed against an image, if any."""
        result = self.session.execute(
            select(ArtistImageReport).where(
                ArtistImageReport.image_id == image_id,
                ArtistImageReport.reported_by == reported_by,
            )
        )
        return result.scalars().first()

    def count_reports(self, image_id: str, reported_by: str | None = None) -> int:
        """Count reports on an image, optionally restricted to one reporter."""
        stmt = select(func.count()).where(ArtistImageReport.image_id == image_id)
        if reported_by is not None:
            stmt = stmt.where(ArtistImageReport.reported_by == reported_by)
        return self.session.execute(stmt).scalar_one()

    def create_report(
        self,
        *,
        image_id: str,
        reported_by: str,
        reason: str | None,
    ) -> ArtistImageReport:
        """Insert a pending report and return it."""
        report = ArtistImageReport(
            image_id=image_id,
            reported_by=reported_by,
            reason=reason,
            status=REPORT_STATUS_PENDING,
        )
        self.session.add(report)
        self.session.flush()
        return report

    def delete_image(self, image_id: str) -> None:
        """Delete an image together with its votes and reports."""
        self.session.execute(delete(ArtistImageVote).where(ArtistImageVote.image_id == image_id))
        self.session.execute(
            delete(ArtistImageReport).where(ArtistImageReport.image_id == image_id)
        )
        self.session.execute(delete(ArtistImage).where(ArtistImage.id == image_id))
