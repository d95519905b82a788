"""Ranking of an artist's images and choice of the displayed one.

Scores are never stored. Every call recomputes them from the votes passed in,
so the result always reflects the vote population at query time.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from chartroom.services.scoring import tally_votes

logger = logging.getLogger(__name__)


class ImageLike(Protocol):
    id: str
    image_url: str
    uploaded_by: str
    uploaded_at: datetime


class VoteLike(Protocol):
    user_id: str
    vote_type: str


@dataclass(frozen=True)
class RankedImage:
    """Snapshot of an image with its vote tallies."""

    image_id: str
    image_url: str
    uploaded_by: str
    uploaded_at: datetime
    upvotes: int
    downvotes: int
    score: int
    viewer_vote: str | None = None


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are always UTC.
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)


def _viewer_vote(votes: Sequence[VoteLike], viewer_id: str | None) -> str | None:
    if viewer_id is None:
        return None
    for vote in votes:
        if vote.user_id == viewer_id:
            return vote.vote_type
    return None


def rank_images(
    images: Iterable[ImageLike],
    votes_by_image: Mapping[str, Sequence[VoteLike]],
    viewer_id: str | None = None,
) -> list[RankedImage]:
    """Return ``images`` ordered best first.

    Images are ordered by score descending, then by upload time descending so
    that the newest of equally scored images wins. The image id is the final
    key, making the order total. ``viewer_id`` only annotates each entry with
    that viewer's own vote and never changes the order.

    Args:
        images: All images belonging to one artist.
        votes_by_image: Every vote cast on those images, keyed by image id.
            Images missing from the mapping count as unvoted.
        viewer_id: Optional user whose vote should be attached to each entry.
    """
    ranked = []
    for image in images:
        votes = votes_by_image.get(image.id, ())
        tally = tally_votes(votes)
        ranked.append(
            RankedImage(
                image_id=image.id,
                image_url=image.image_url,
                uploaded_by=image.uploaded_by,
                uploaded_at=image.uploaded_at,
                upvotes=tally.upvotes,
                downvotes=tally.downvotes,
                score=tally.score,
                viewer_vote=_viewer_vote(votes, viewer_id),
            )
        )

    ranked.sort(
        key=lambda item: (item.score, _as_utc(item.uploaded_at), item.image_id),
        reverse=True,
    )
    logger.debug("Ranked %d artist images", len(ranked))
    return ranked


def select_image(ranked: Sequence[RankedImage]) -> RankedImage | None:
    """Return the image to display, if any.

    The head of the ranking is selected unless its score is negative, in which
    case no image is shown at all.
    """
    if not ranked:
        return None
    top = ranked[0]
    return top if top.score >= 0 else None
