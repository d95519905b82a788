"""Vote tallies for artist images."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from chartroom.models.artist_image import VOTE_DOWN, VOTE_UP


class HasVoteType(Protocol):
    vote_type: str


@dataclass(frozen=True)
class VoteTally:
    """Up/down counts for one image and the score derived from them."""

    upvotes: int = 0
    downvotes: int = 0

    @property
    def score(self) -> int:
        return calculate_image_score(self.upvotes, self.downvotes)


def calculate_image_score(upvotes: int, downvotes: int) -> int:
    """Return the net score of an image."""
    return upvotes - downvotes


def tally_votes(votes: Iterable[HasVoteType]) -> VoteTally:
    """Count the up and down votes in ``votes``.

    Any iterable of objects exposing ``vote_type`` is accepted; an empty
    iterable yields a zero tally.
    """
    upvotes = 0
    downvotes = 0
    for vote in votes:
        if vote.vote_type == VOTE_UP:
            upvotes += 1
        elif vote.vote_type == VOTE_DOWN:
            downvotes += 1
    return VoteTally(upvotes=upvotes, downvotes=downvotes)
