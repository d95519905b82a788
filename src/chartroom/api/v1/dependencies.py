"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from chartroom.core.security import decode_access_token
from chartroom.db.session import get_db
from chartroom.models import User
from chartroom.repositories.artist_image_repo import ArtistImageRepository
from chartroom.repositories.chart_entry_repo import ChartEntryRepository
from chartroom.services.artist_images import ArtistImageService
from chartroom.services.storage import LocalImageStorage, get_image_storage

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str, db: Session) -> User:
    try:
        payload = decode_access_token(token)
    except JWTError as err:
        raise _credentials_error() from err

    subject = payload.get("sub")
    if not isinstance(subject, str):
        raise _credentials_error()

    user = db.get(User, subject)
    if user is None:
        raise _credentials_error("User not found")
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the JWT bearer token.

    Raises:
        HTTPException: If the token is missing or invalid, or the user is unknown.
    """
    if credentials is None:
        raise _credentials_error("Not authenticated")
    return _user_from_token(credentials.credentials, db)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Return the authenticated user, or None for anonymous requests."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, db)


def get_storage_dep() -> LocalImageStorage:
    """Return the configured image storage backend."""
    return get_image_storage()


def get_artist_image_service(
    db: SessionDep,
    storage: Annotated[LocalImageStorage, Depends(get_storage_dep)],
) -> ArtistImageService:
    """Build an artist image service bound to the request's session."""
    return ArtistImageService(
        images=ArtistImageRepository(db),
        chart_entries=ChartEntryRepository(db),
        storage=storage,
    )


def get_chart_entry_repo(db: SessionDep) -> ChartEntryRepository:
    return ChartEntryRepository(db)


# Type aliases for common dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
ArtistImageServiceDep = Annotated[ArtistImageService, Depends(get_artist_image_service)]
ChartEntryRepoDep = Annotated[ChartEntryRepository, Depends(get_chart_entry_repo)]
