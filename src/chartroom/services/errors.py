"""Exceptions raised by the artist image and chart search services."""

from __future__ import annotations


class ArtistImageError(RuntimeError):
    """Base error for image curation and chart search failures."""


class ValidationFailure(ArtistImageError):
    """Raised when input is malformed; nothing has been written."""


class InvalidVoteError(ValidationFailure):
    """Raised when a vote direction is neither ``up`` nor ``down``."""


class InvalidUploadError(ValidationFailure):
    """Raised when an uploaded file fails size, type or extension checks."""


class ImageNotFoundError(ArtistImageError):
    """Raised when the referenced artist image does not exist."""


class GroupNotFoundError(ArtistImageError):
    """Raised when the referenced group does not exist."""


class ImagePermissionError(ArtistImageError):
    """Raised when a user may not delete the image."""


class GroupAccessError(ArtistImageError):
    """Raised when a user is not a member of the group being searched."""


class DuplicateReportError(ArtistImageError):
    """Raised when a user reports the same image a second time."""


class StorageError(RuntimeError):
    """Raised by storage backends when an object cannot be written or removed."""
