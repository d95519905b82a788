# src/chartroom/services/artist_images.py
"""Crowd-sourced artist image curation.

The service ties together the vote store, the scoring and ranking functions
and the image storage backend. It holds no state of its own: every read
ranks the images afresh from the votes currently stored.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from chartroom.models import ArtistImage, ArtistImageReport, User
from chartroom.models.artist_image import VOTE_TYPES, VOTE_UP
from chartroom.repositories.artist_image_repo import ArtistImageRepository
from chartroom.repositories.chart_entry_repo import ChartEntryRepository
from chartroom.schemas.artist_image import GalleryImage, UploaderInfo, VoteResult
from chartroom.services.errors import (
    DuplicateReportError,
    ImageNotFoundError,
    ImagePermissionError,
    InvalidVoteError,
    StorageError,
)
from chartroom.services.normalization import artist_name_from_slug, normalize_artist_name
from chartroom.services.ranking import rank_images, select_image
from chartroom.services.scoring import tally_votes
from chartroom.services.storage import (
    LocalImageStorage,
    build_object_name,
    validate_image_upload,
)

logger = logging.getLogger(__name__)


class ArtistImageService:
    """Service handling votes, rankings, reports and removal of artist images."""

    def __init__(
        self,
        images: ArtistImageRepository,
        chart_entries: ChartEntryRepository,
        storage: LocalImageStorage,
    ) -> None:
        self.images = images
        self.chart_entries = chart_entries
        self.storage = storage

    @property
    def session(self):
        return self.images.session

    def resolve_artist_slug(self, slug: str) -> str:
        """Map an artist URL slug to the normalized artist key.

        The most recent artist chart entry with this slug wins; otherwise the
        slug itself is turned back into a name.
        """
        entry_key = self.chart_entries.latest_artist_key_for_slug(slug)
        if entry_key is not None:
            return normalize_artist_name(entry_key)
        return artist_name_from_slug(slug)

    def _get_image_or_raise(self, image_id: str) -> ArtistImage:
        image = self.images.get_image(image_id)
        if image is None:
            raise ImageNotFoundError(f"Image {image_id} not found")
        return image

    def get_gallery(self, artist_name: str, viewer_id: str | None = None) -> list[GalleryImage]:
        """Return every image of an artist, best ranked first.

        Args:
            artist_name: Raw or normalized artist name.
            viewer_id: When given, each entry carries this user's own vote.
        """
        images = self.images.list_for_artist(normalize_artist_name(artist_name))
        by_id = {image.id: image for image in images}
        votes = self.images.votes_for_images(list(by_id))

        gallery = []
        for ranked in rank_images(images, votes, viewer_id=viewer_id):
            uploader = by_id[ranked.image_id].uploader
            gallery.append(
                GalleryImage(
                    id=ranked.image_id,
                    image_url=ranked.image_url,
                    uploaded_by=ranked.uploaded_by,
                    uploaded_by_user=(
                        UploaderInfo.model_validate(uploader) if uploader is not None else None
                    ),
                    uploaded_at=ranked.uploaded_at,
                    upvotes=ranked.upvotes,
                    downvotes=ranked.downvotes,
                    score=ranked.score,
                    user_vote=ranked.viewer_vote,
                )
            )
        return gallery

    def get_selected_image_url(self, artist_name: str) -> str | None:
        """Return the URL of the image currently shown for an artist, if any."""
        images = self.images.list_for_artist(normalize_artist_name(artist_name))
        votes = self.images.votes_for_images([image.id for image in images])
        selected = select_image(rank_images(images, votes))
        return selected.image_url if selected is not None else None

    def cast_vote(self, image_id: str, voter_id: str, vote_type: str) -> VoteResult:
        """Record a user's vote on an image and return the fresh tallies.

        Voting the same direction again changes nothing; voting the other
        direction flips the existing vote in place.

        Raises:
            InvalidVoteError: If ``vote_type`` is not "up" or "down".
            ImageNotFoundError: If the image does not exist.
        """
        if vote_type not in VOTE_TYPES:
            raise InvalidVoteError('Invalid vote type. Must be "up" or "down"')
        self._get_image_or_raise(image_id)

        self.images.upsert_vote(image_id=image_id, user_id=voter_id, vote_type=vote_type)
        self.session.commit()

        tally = tally_votes(self.images.votes_for_image(image_id))
        return VoteResult(
            upvotes=tally.upvotes,
            downvotes=tally.downvotes,
            score=tally.score,
            user_vote=vote_type,
        )

    def report_image(
        self,
        image_id: str,
        reporter_id: str,
        reason: str | None = None,
    ) -> ArtistImageReport:
        """File a pending report against an image.

        Raises:
            ImageNotFoundError: If the image does not exist.
            DuplicateReportError: If this user already reported the image.
        """
        self._get_image_or_raise(image_id)
        if self.images.find_report(image_id, reporter_id) is not None:
            raise DuplicateReportError("You have already reported this image")

        try:
            report = self.images.create_report(
                image_id=image_id,
                reported_by=reporter_id,
                reason=reason or None,
            )
            self.session.commit()
        except IntegrityError as err:
            self.session.rollback()
            raise DuplicateReportError("You have already reported this image") from err
        return report

    def delete_image(self, image_id: str, acting_user: User) -> None:
        """Delete an image with its votes and reports.

        Only the uploader or a superuser may delete. The records are committed
        first; the stored file is removed afterwards and a failure there is
        only logged.

        Raises:
            ImageNotFoundError: If the image does not exist.
            ImagePermissionError: If ``acting_user`` may not delete the image.
        """
        image = self._get_image_or_raise(image_id)
        if image.uploaded_by != acting_user.id and not acting_user.is_superuser:
            raise ImagePermissionError("You do not have permission to delete this image")

        image_url = image.image_url
        self.images.delete_image(image_id)
        self.session.commit()
        logger.info("Deleted artist image %s (by user %s)", image_id, acting_user.id)

        try:
            self.storage.delete(image_url)
        except StorageError as err:
            logger.warning("Error deleting image file for image %s: %s", image_id, err)

    def upload_image(
        self,
        artist_name: str,
        uploader: User,
        *,
        filename: str,
        content_type: str | None,
        content: bytes,
    ) -> ArtistImage:
        """Store a new image for an artist and give it the uploader's upvote.

        Raises:
            InvalidUploadError: If the file fails validation.
            StorageError: If the file cannot be stored.
        """
        extension = validate_image_upload(filename, content_type, len(content))
        artist_key = normalize_artist_name(artist_name)
        image_url = self.storage.save(build_object_name(artist_key, extension), content)

        image = self.images.create_image(
            artist_name=artist_key,
            image_url=image_url,
            uploaded_by=uploader.id,
        )
        self.images.upsert_vote(image_id=image.id, user_id=uploader.id, vote_type=VOTE_UP)
        self.session.commit()
        logger.info("Uploaded artist image %s for %r", image.id, artist_key)
        return image
