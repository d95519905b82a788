"""Artist image storage on the local filesystem.

Files are written below ``settings.upload_dir`` and served from
``settings.upload_url_prefix``. The raw bytes are stored as uploaded so
animated GIF/WEBP images stay animated.
"""

from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path, PurePosixPath

from chartroom.core.settings import settings
from chartroom.services.errors import InvalidUploadError, StorageError
from chartroom.services.normalization import normalize_artist_name

logger = logging.getLogger(__name__)


def validate_image_upload(filename: str, content_type: str | None, size: int) -> str:
    """Check an upload against the configured limits and return its extension.

    Raises:
        InvalidUploadError: If the file is too large, has a disallowed MIME
            type or carries a disallowed extension.
    """
    if size > settings.max_image_upload_bytes:
        max_mb = settings.max_image_upload_bytes / (1024 * 1024)
        raise InvalidUploadError(f"File size exceeds {max_mb:g}MB limit")

    if (content_type or "").lower() not in settings.allowed_image_types:
        raise InvalidUploadError(
            "Invalid file type. Only JPEG, PNG, WebP, and GIF images are allowed."
        )

    suffix = PurePosixPath(filename.lower()).suffix
    if suffix not in settings.allowed_image_extensions:
        allowed = ", ".join(settings.allowed_image_extensions)
        raise InvalidUploadError(f"Invalid file extension. Allowed extensions: {allowed}")
    return suffix


def build_object_name(artist_name: str, extension: str) -> str:
    """Return ``<artist-folder>/<millis>-<random><ext>`` for a new upload."""
    folder = "".join(
        ch if ch.isascii() and ch.isalnum() else "-" for ch in normalize_artist_name(artist_name)
    )
    return f"{folder}/{int(time.time() * 1000)}-{secrets.token_hex(6)}{extension}"


class LocalImageStorage:
    """Stores artist images in a directory tree and maps them to public URLs."""

    def __init__(self, root: Path | str | None = None, url_prefix: str | None = None) -> None:
        self.root = Path(root if root is not None else settings.upload_dir)
        self.url_prefix = (url_prefix or settings.upload_url_prefix).rstrip("/")

    def save(self, object_name: str, content: bytes) -> str:
        """Write ``content`` under ``object_name`` and return its public URL.

        Raises:
            StorageError: If the file cannot be written.
        """
        path = self.root / object_name
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as err:
            raise StorageError(f"Failed to store {object_name}: {err}") from err

        logger.info("Saved artist image %s to %s", object_name, path)
        return f"{self.url_prefix}/{object_name}"

    def delete(self, url: str) -> bool:
        """Remove the file behind ``url``.

        URLs outside this store and files that are already gone are skipped
        with a warning. Returns True if a file was removed.

        Raises:
            StorageError: If the file exists but cannot be removed.
        """
        prefix = f"{self.url_prefix}/"
        if not url.startswith(prefix):
            logger.warning("Skipping deletion of non-local image url=%s", url)
            return False

        path = (self.root / url[len(prefix):]).resolve()
        if not path.is_relative_to(self.root.resolve()):
            logger.warning("Refusing to delete image outside storage root url=%s", url)
            return False
        if not path.exists():
            logger.warning("Image file not found for deletion: %s", path)
            return False

        try:
            path.unlink()
        except OSError as err:
            raise StorageError(f"Failed to delete {path}: {err}") from err
        return True


def get_image_storage() -> LocalImageStorage:
    """Return the storage backend selected by ``settings.storage_type``."""
    if settings.storage_type != "local":
        raise StorageError(f"Unsupported storage type {settings.storage_type!r}")
    return LocalImageStorage()
