# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, date, datetime, timedelta
from itertools import count
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from chartroom.api.v1.dependencies import get_storage_dep
from chartroom.core.security import create_access_token
from chartroom.db.session import Base
from chartroom.db.session import get_db as app_get_session
from chartroom.main import app as fastapi_app
from chartroom.models import (
    ArtistImage,
    ArtistImageVote,
    Group,
    GroupChartEntry,
    GroupMember,
    User,
)
from chartroom.repositories.artist_image_repo import ArtistImageRepository
from chartroom.repositories.chart_entry_repo import ChartEntryRepository
from chartroom.services.artist_images import ArtistImageService
from chartroom.services.storage import LocalImageStorage

TEST_DB_URL = "sqlite://"
UPLOAD_URL_PREFIX = "/uploads/artist-images"

_USER_COUNTER = count(1)
_BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def storage(tmp_path: Path) -> LocalImageStorage:
    """Image storage rooted in a per-test temporary directory."""
    return LocalImageStorage(root=tmp_path / "artist-images", url_prefix=UPLOAD_URL_PREFIX)


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    storage: LocalImageStorage,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_storage_dep] = lambda: storage
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_storage_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def image_service(db_session: Session, storage: LocalImageStorage) -> ArtistImageService:
    """Artist image service wired to the test session and storage."""
    return ArtistImageService(
        images=ArtistImageRepository(db_session),
        chart_entries=ChartEntryRepository(db_session),
        storage=storage,
    )


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users."""

    def _make_user(name: str = "Listener", *, is_superuser: bool = False) -> User:
        n = next(_USER_COUNTER)
        user = User(
            email=f"user{n}@example.com",
            name=name,
            lastfm_username=f"listener{n}",
            is_superuser=is_superuser,
        )
        db_session.add(user)
        db_session.flush()
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("Test User")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second user."""
    return make_user("Other User")


@pytest.fixture()
def superuser(make_user: Callable[..., User]) -> User:
    """Create and return a privileged user."""
    return make_user("Admin", is_superuser=True)


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def make_image(db_session: Session, storage: LocalImageStorage) -> Callable[..., ArtistImage]:
    """Return a factory that persists an artist image with a stored file.

    ``minutes`` offsets the upload time from a fixed base, so larger values
    mean more recent uploads.
    """
    counter = count(1)

    def _make_image(
        artist_name: str,
        uploader: User,
        *,
        minutes: int = 0,
        votes: dict[User, str] | None = None,
    ) -> ArtistImage:
        n = next(counter)
        object_name = f"{artist_name.replace(' ', '-')}/image-{n}.png"
        image = ArtistImage(
            artist_name=artist_name,
            image_url=storage.save(object_name, b"\x89PNG fake"),
            uploaded_by=uploader.id,
            uploaded_at=_BASE_TIME + timedelta(minutes=minutes),
        )
        db_session.add(image)
        db_session.flush()
        for voter, vote_type in (votes or {}).items():
            db_session.add(
                ArtistImageVote(image_id=image.id, user_id=voter.id, vote_type=vote_type)
            )
        db_session.flush()
        return image

    return _make_image


@pytest.fixture()
def group(db_session: Session, test_user: User) -> Group:
    """Create a group with the primary test user as its only member."""
    group = Group(name="Test Group")
    db_session.add(group)
    db_session.flush()
    db_session.add(GroupMember(group_id=group.id, user_id=test_user.id))
    db_session.flush()
    return group


@pytest.fixture()
def add_chart_entry(db_session: Session) -> Callable[..., GroupChartEntry]:
    """Return a factory that persists chart rows."""

    def _add_chart_entry(
        group: Group,
        chart_type: str,
        entry_key: str,
        name: str,
        week_start: date,
        *,
        artist: str | None = None,
        slug: str | None = None,
    ) -> GroupChartEntry:
        entry = GroupChartEntry(
            group_id=group.id,
            chart_type=chart_type,
            entry_key=entry_key,
            name=name,
            artist=artist,
            slug=slug,
            week_start=week_start,
            position=1,
            playcount=10,
        )
        db_session.add(entry)
        db_session.flush()
        return entry

    return _add_chart_entry
