"""
Cover image storage.

Uploaded covers are stored as files under a root directory, keyed by the
owner's user id and a generated filename, and served back at a public URL.
"""

import logging
import re
import uuid
from pathlib import Path

from comicvault.config import settings
from comicvault.models.failure import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})

# 10 MB
MAX_COVER_BYTES = 10 * 1024 * 1024

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def _safe_segment(user_id: str) -> str:
    """Directory name for a user id, safe on any filesystem."""
    return _UNSAFE_CHARS.sub("_", user_id) or "_"


class CoverStorage:
    """Blob store for cover images."""

    def __init__(self, root: Path, public_base_url: str) -> None:
        self.root = root
        self.public_base_url = public_base_url.rstrip("/")

    def key_for(self, user_id: str, original_filename: str) -> str:
        """
        Generate a storage key "<user>/<random>.<ext>" for an upload.

        Raises:
            ValidationError: If the file extension is not an image type
        """
        extension = Path(original_filename or "").suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                "Cover must be an image file",
                detail=f"Allowed extensions: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
            )
        return f"{_safe_segment(user_id)}/{uuid.uuid4().hex}{extension}"

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def save(self, user_id: str, original_filename: str, content: bytes) -> str:
        """
        Store an uploaded cover.

        Returns:
            Public URL of the stored image

        Raises:
            ValidationError: If the upload is empty, too large or not an image
            PersistenceError: If the file cannot be written
        """
        if not content:
            raise ValidationError("Cover file is empty")
        if len(content) > MAX_COVER_BYTES:
            raise ValidationError("Cover file is too large", detail=f"Limit: {MAX_COVER_BYTES} bytes")

        key = self.key_for(user_id, original_filename)
        path = self.root / key

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            raise PersistenceError("upload cover", str(e)) from e

        logger.info("Stored cover %s (%d bytes)", key, len(content))
        return self.public_url(key)


def get_cover_storage() -> CoverStorage:
    """Dependency returning storage configured from settings."""
    return CoverStorage(Path(settings.cover_storage_dir), settings.cover_public_base_url)
