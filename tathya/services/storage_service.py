"""Storage service for post, report and document files.

Uses local disk. All files are organized by user_id: users/{user_id}/{kind}/{filename}.
Attachments live under UPLOAD_DIR and are served by the app under /uploads;
personal documents live under DOCUMENT_DIR and are never mounted.
"""
import uuid
from pathlib import Path
from typing import Protocol

from tathya.core.config import settings


class StorageBackend(Protocol):
    """Protocol for storage backends."""

    def save(self, user_id: str, kind: str, data: bytes, ext: str) -> str:
        """Save file and return its public path."""
        ...

    def delete(self, path: str) -> bool:
        """Delete file by public path. Returns True if deleted."""
        ...

    def local_path(self, path: str) -> Path | None:
        """File on disk for a public path, if this backend holds it."""
        ...


class LocalStorage:
    """Store files on local disk. Path: uploads/users/{user_id}/{kind}/{uuid}{ext}"""

    def __init__(self, base_dir: str | None = None, base_url: str | None = None):
        self.base_dir = Path(base_dir or settings.UPLOAD_DIR).resolve()
        self.base_url = (settings.MEDIA_BASE_URL if base_url is None else base_url).rstrip("/")

    def _user_path(self, user_id: str, kind: str) -> Path:
        path = self.base_dir / "users" / str(user_id) / kind
        path.mkdir(parents=True, exist_ok=True)
        return path

    def save(self, user_id: str, kind: str, data: bytes, ext: str) -> str:
        path = self._user_path(user_id, kind)
        filename = f"{uuid.uuid4().hex}{ext}"
        (path / filename).write_bytes(data)
        rel = f"users/{user_id}/{kind}/{filename}"
        return f"{self.base_url}/uploads/{rel}"

    def local_path(self, path: str) -> Path | None:
        """Resolve a public path to the file on disk, or None if it is not ours."""
        if "/uploads/" not in path:
            return None
        filepath = (self.base_dir / path.split("/uploads/", 1)[1]).resolve()
        if self.base_dir not in filepath.parents or not filepath.is_file():
            return None
        return filepath

    def delete(self, path: str) -> bool:
        filepath = self.local_path(path)
        if filepath is None:
            return False
        filepath.unlink()
        return True


_storage: StorageBackend | None = None
_document_storage: StorageBackend | None = None


def get_storage() -> StorageBackend:
    global _storage
    if _storage is None:
        _storage = LocalStorage()
    return _storage


def get_document_storage() -> StorageBackend:
    """Private storage for personal documents; served only through the download route."""
    global _document_storage
    if _document_storage is None:
        _document_storage = LocalStorage(base_dir=settings.DOCUMENT_DIR, base_url="")
    return _document_storage
