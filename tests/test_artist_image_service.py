# mypy: ignore-errors
# tests/test_artist_image_service.py
"""Tests for the artist image service against an in-memory database."""

from datetime import date
from pathlib import Path

import pytest
from sqlalchemy import func, select

from chartroom.models import ArtistImage, ArtistImageReport, ArtistImageVote
from chartroom.services.errors import (
    DuplicateReportError,
    ImageNotFoundError,
    ImagePermissionError,
    InvalidUploadError,
    InvalidVoteError,
    StorageError,
)


def _count(db_session, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    return db_session.scalar(stmt)


def test_vote_flip_keeps_a_single_record(
    image_service, db_session, make_image, make_user, test_user
) -> None:
    """Up then down by one voter leaves one "down" vote and drops the score by 2."""
    fans = [make_user(), make_user()]
    image = make_image("drake", fans[0], votes={fans[0]: "up", fans[1]: "up"})

    all_up = image_service.cast_vote(image.id, test_user.id, "up")
    flipped = image_service.cast_vote(image.id, test_user.id, "down")

    assert all_up.score == 3
    assert flipped.score == all_up.score - 2
    assert (flipped.upvotes, flipped.downvotes, flipped.user_vote) == (2, 1, "down")
    votes = db_session.scalars(
        select(ArtistImageVote).where(
            ArtistImageVote.image_id == image.id,
            ArtistImageVote.user_id == test_user.id,
        )
    ).all()
    assert [vote.vote_type for vote in votes] == ["down"]


def test_repeating_a_vote_is_idempotent(image_service, db_session, make_image, test_user) -> None:
    image = make_image("drake", test_user)

    first = image_service.cast_vote(image.id, test_user.id, "down")
    second = image_service.cast_vote(image.id, test_user.id, "down")

    assert first == second
    assert second.score == -1
    assert _count(db_session, ArtistImageVote, ArtistImageVote.image_id == image.id) == 1


def test_invalid_direction_is_rejected_before_writing(
    image_service, db_session, make_image, test_user
) -> None:
    image = make_image("drake", test_user)

    with pytest.raises(InvalidVoteError):
        image_service.cast_vote(image.id, test_user.id, "sideways")

    assert _count(db_session, ArtistImageVote, ArtistImageVote.image_id == image.id) == 0


def test_vote_on_missing_image(image_service, test_user) -> None:
    with pytest.raises(ImageNotFoundError):
        image_service.cast_vote("no-such-image", test_user.id, "up")


def test_self_vote_is_allowed(image_service, make_image, test_user) -> None:
    image = make_image("drake", test_user)
    assert image_service.cast_vote(image.id, test_user.id, "up").score == 1


def test_gallery_and_selection_follow_ranking(image_service, make_image, make_user) -> None:
    """Equal scores are broken by recency and the winner is selected."""
    uploader = make_user()
    voters = [make_user() for _ in range(5)]
    a = make_image("drake", uploader, minutes=1, votes={v: "up" for v in voters})
    b = make_image("drake", uploader, minutes=2, votes={v: "up" for v in voters})
    c = make_image("drake", uploader, minutes=3, votes={voters[0]: "down"})

    gallery = image_service.get_gallery("drake")

    assert [item.id for item in gallery] == [b.id, a.id, c.id]
    assert [item.score for item in gallery] == [5, 5, -1]
    assert gallery[0].uploaded_by_user.lastfm_username == uploader.lastfm_username
    assert image_service.get_selected_image_url("drake") == b.image_url


def test_lookup_uses_normalized_name(image_service, make_image, test_user) -> None:
    image = make_image("drake", test_user)

    for spelling in ("  Drake ", "DRAKE", "drake"):
        assert [item.id for item in image_service.get_gallery(spelling)] == [image.id]
        assert image_service.get_selected_image_url(spelling) == image.image_url


def test_negative_only_image_is_listed_but_not_selected(
    image_service, make_image, make_user, test_user
) -> None:
    voters = [make_user() for _ in range(3)]
    image = make_image("nickelback", test_user, votes={v: "down" for v in voters})

    gallery = image_service.get_gallery("nickelback")

    assert [(item.id, item.score) for item in gallery] == [(image.id, -3)]
    assert image_service.get_selected_image_url("nickelback") is None


def test_unknown_artist_has_empty_gallery(image_service) -> None:
    assert image_service.get_gallery("nobody") == []
    assert image_service.get_selected_image_url("nobody") is None


def test_gallery_marks_viewer_vote(image_service, make_image, test_user, other_user) -> None:
    voted = make_image("drake", other_user, minutes=1, votes={test_user: "down"})
    unvoted = make_image("drake", other_user, minutes=2)

    gallery = {item.id: item for item in image_service.get_gallery("drake", test_user.id)}

    assert gallery[voted.id].user_vote == "down"
    assert gallery[unvoted.id].user_vote is None


def test_duplicate_report_is_a_conflict(
    image_service, db_session, make_image, test_user, other_user
) -> None:
    image = make_image("drake", other_user)

    report = image_service.report_image(image.id, test_user.id, "Not the artist")

    assert report.status == "pending"
    with pytest.raises(DuplicateReportError):
        image_service.report_image(image.id, test_user.id, "Still not the artist")
    assert image_service.images.count_reports(image.id, test_user.id) == 1


def test_report_missing_image(image_service, test_user) -> None:
    with pytest.raises(ImageNotFoundError):
        image_service.report_image("missing", test_user.id)


def test_delete_requires_uploader_or_superuser(
    image_service, db_session, make_image, test_user, other_user
) -> None:
    image = make_image("drake", test_user)

    with pytest.raises(ImagePermissionError):
        image_service.delete_image(image.id, other_user)

    assert _count(db_session, ArtistImage, ArtistImage.id == image.id) == 1


def test_delete_cascades_votes_and_reports(
    image_service, db_session, make_image, storage, test_user, other_user
) -> None:
    image = make_image("drake", test_user, votes={test_user: "up", other_user: "down"})
    image_service.report_image(image.id, other_user.id, "spam")
    stored_file = storage.root / image.image_url.removeprefix(storage.url_prefix + "/")
    assert stored_file.exists()

    image_service.delete_image(image.id, test_user)

    assert _count(db_session, ArtistImage, ArtistImage.id == image.id) == 0
    assert _count(db_session, ArtistImageVote, ArtistImageVote.image_id == image.id) == 0
    assert _count(db_session, ArtistImageReport, ArtistImageReport.image_id == image.id) == 0
    assert not stored_file.exists()
    assert image_service.get_gallery("drake") == []


def test_superuser_can_delete_any_image(
    image_service, db_session, make_image, test_user, superuser
) -> None:
    image = make_image("drake", test_user)

    image_service.delete_image(image.id, superuser)

    assert _count(db_session, ArtistImage, ArtistImage.id == image.id) == 0


def test_storage_failure_does_not_block_delete(
    image_service, db_session, make_image, test_user, monkeypatch, caplog
) -> None:
    image = make_image("drake", test_user)

    def _broken_delete(url: str) -> bool:
        raise StorageError("disk on fire")

    monkeypatch.setattr(image_service.storage, "delete", _broken_delete)

    image_service.delete_image(image.id, test_user)

    assert _count(db_session, ArtistImage, ArtistImage.id == image.id) == 0
    assert "disk on fire" in caplog.text


def test_failed_record_delete_keeps_stored_file(
    image_service, db_session, make_image, storage, test_user, monkeypatch
) -> None:
    image = make_image("drake", test_user)
    stored_file = storage.root / image.image_url.removeprefix(storage.url_prefix + "/")

    def _failing_delete(image_id: str) -> None:
        raise RuntimeError("database went away")

    monkeypatch.setattr(image_service.images, "delete_image", _failing_delete)

    with pytest.raises(RuntimeError):
        image_service.delete_image(image.id, test_user)

    assert stored_file.exists()
    assert _count(db_session, ArtistImage, ArtistImage.id == image.id) == 1


def test_concurrent_duplicate_report_is_a_conflict(
    image_service, make_image, test_user, other_user, monkeypatch
) -> None:
    """A report that slips past the lookup is still stopped by the unique constraint."""
    image = make_image("drake", other_user)
    image_service.report_image(image.id, test_user.id, "first")

    monkeypatch.setattr(image_service.images, "find_report", lambda image_id, reported_by: None)

    with pytest.raises(DuplicateReportError):
        image_service.report_image(image.id, test_user.id, "second")
    assert image_service.images.count_reports(image.id, test_user.id) == 1


def test_upload_stores_file_and_adds_uploader_upvote(
    image_service, db_session, storage, test_user
) -> None:
    image = image_service.upload_image(
        "  Sigur Rós ",
        test_user,
        filename="Cover.PNG",
        content_type="image/png",
        content=b"\x89PNG data",
    )

    assert image.artist_name == "sigur rós"
    assert image.image_url.startswith(storage.url_prefix + "/sigur-r-s/")
    assert image.image_url.endswith(".png")
    stored = storage.root / image.image_url.removeprefix(storage.url_prefix + "/")
    assert stored.read_bytes() == b"\x89PNG data"

    gallery = image_service.get_gallery("sigur rós", test_user.id)
    assert [(item.id, item.score, item.user_vote) for item in gallery] == [(image.id, 1, "up")]


@pytest.mark.parametrize(
    ("filename", "content_type", "size"),
    [
        ("photo.png", "image/png", 5 * 1024 * 1024 + 1),
        ("photo.png", "application/pdf", 10),
        ("photo.bmp", "image/png", 10),
    ],
)
def test_upload_validation(
    image_service, db_session, storage, test_user, filename, content_type, size
) -> None:
    with pytest.raises(InvalidUploadError):
        image_service.upload_image(
            "drake",
            test_user,
            filename=filename,
            content_type=content_type,
            content=b"x" * size,
        )

    assert _count(db_session, ArtistImage) == 0
    assert not Path(storage.root).exists()


def test_resolve_artist_slug(image_service, group, add_chart_entry) -> None:
    add_chart_entry(group, "artists", "sigur rós", "Sigur Rós", date(2026, 1, 5), slug="sigur-ros")

    assert image_service.resolve_artist_slug("sigur-ros") == "sigur rós"
    assert image_service.resolve_artist_slug("The-Weeknd") == "the weeknd"
