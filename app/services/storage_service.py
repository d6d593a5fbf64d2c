"""Local-directory blob store used for company logos and other uploads."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from app.core.config import get_config
from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
LOGO_PREFIX = "company/logos"


@dataclass(frozen=True)
class StoredBlob:
    key: str
    size: int
    content_type: str


class StorageService:
    """Store, read and delete blobs under ``STORAGE_DIR`` by relative key."""

    def __init__(self, root: str | Path | None = None, max_bytes: int | None = None) -> None:
        cfg = get_config()
        self.root = Path(root or cfg.STORAGE_DIR)
        self.max_bytes = max_bytes or cfg.MAX_UPLOAD_BYTES

    def _path_for(self, key: str) -> Path:
        relative = PurePosixPath(key)
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise StorageError(f"Invalid storage key: {key}")
        return self.root.joinpath(*relative.parts)

    def validate_image(self, content_type: str | None, size: int) -> None:
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise StorageError("Invalid file type. Please upload a JPEG, PNG, GIF, or WebP image.")
        if size > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise StorageError(f"File too large. Please upload an image smaller than {limit_mb}MB.")

    def upload(self, key: str, data: bytes, content_type: str) -> StoredBlob:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            logger.exception("storage.upload.failed", extra={"event": "storage.upload.failed", "key": key})
            raise StorageError("Failed to upload file.") from exc
        logger.info("storage.upload.completed", extra={"event": "storage.upload.completed", "key": key, "size": len(data)})
        return StoredBlob(key=key, size=len(data), content_type=content_type)

    def upload_logo(self, data: bytes, content_type: str | None, filename: str | None = None) -> StoredBlob:
        """Validate and store a company logo under a timestamped key.

        The extension comes from the validated content type; the client's
        filename is only logged.
        """
        self.validate_image(content_type, len(data))
        key = f"{LOGO_PREFIX}/company-logo-{int(time.time() * 1000)}.{ALLOWED_IMAGE_TYPES[content_type]}"
        logger.info(
            "storage.logo.received",
            extra={"event": "storage.logo.received", "key": key, "original_filename": filename},
        )
        return self.upload(key, data, content_type)

    def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()

    def path(self, key: str) -> Path:
        """Resolve an existing blob to its file path."""
        path = self._path_for(key)
        if not path.is_file():
            raise StorageError(f"File not found: {key}")
        return path

    def read(self, key: str) -> bytes:
        return self.path(key).read_bytes()

    def delete(self, key: str) -> bool:
        """Delete a blob; a missing blob is logged and treated as deleted."""
        path = self._path_for(key)
        if not path.exists():
            logger.warning("storage.delete.missing", extra={"event": "storage.delete.missing", "key": key})
            return False
        try:
            path.unlink()
        except OSError as exc:
            logger.exception("storage.delete.failed", extra={"event": "storage.delete.failed", "key": key})
            raise StorageError("Failed to delete file.") from exc
        return True

    def upload_limits(self) -> dict:
        return {
            "max_size": self.max_bytes,
            "allowed_types": list(ALLOWED_IMAGE_TYPES),
            "allowed_extensions": sorted(set(ALLOWED_IMAGE_TYPES.values()) | {"jpeg"}),
        }
