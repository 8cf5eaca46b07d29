"""Validation and storage of uploaded files for posts, reports and documents (all-or-nothing per request)."""
from pathlib import PurePath

from fastapi import UploadFile

from tathya.core.config import settings
from tathya.core.errors import ValidationError
from tathya.services.storage_service import StorageBackend

ALLOWED_TYPES = {
    "application/pdf",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

EXT_MAP = {
    "application/pdf": ".pdf",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
}


def _is_allowed(content_type: str) -> bool:
    return content_type in ALLOWED_TYPES or content_type.startswith("video/")


def _get_ext(file: UploadFile) -> str:
    content_type = file.content_type or ""
    if content_type in EXT_MAP:
        return EXT_MAP[content_type]
    return PurePath(file.filename or "").suffix.lower() or ".bin"


async def read_attachments(
    files: list[UploadFile],
    max_files: int | None = None,
    owner: str = "post",
) -> list[tuple[UploadFile, bytes]]:
    """Validate every file before any is stored."""
    files = [f for f in files if f.filename]
    max_files = settings.MAX_ATTACHMENTS if max_files is None else max_files
    if len(files) > max_files:
        raise ValidationError(f"Maximum {max_files} attachments per {owner}")
    max_bytes = settings.MAX_ATTACHMENT_MB * 1024 * 1024
    loaded: list[tuple[UploadFile, bytes]] = []
    for f in files:
        content_type = f.content_type or ""
        if not _is_allowed(content_type):
            raise ValidationError(
                "Unsupported file format. Allowed: PDF, JPG, JPEG, PNG, DOC, DOCX, and common video formats."
            )
        data = await f.read()
        if len(data) > max_bytes:
            raise ValidationError(f"File too large. Max {settings.MAX_ATTACHMENT_MB}MB")
        loaded.append((f, data))
    return loaded


def store_attachments(
    storage: StorageBackend,
    user_id: str,
    loaded: list[tuple[UploadFile, bytes]],
    kind: str = "posts",
) -> list[dict]:
    stored: list[dict] = []
    try:
        for f, data in loaded:
            path = storage.save(user_id, kind, data, _get_ext(f))
            stored.append(
                {
                    "filename": f.filename or PurePath(path).name,
                    "path": path,
                    "mimetype": f.content_type,
                    "size": len(data),
                }
            )
    except OSError:
        discard_attachments(storage, stored)
        raise
    return stored


def discard_attachments(storage: StorageBackend, attachments: list[dict]) -> None:
    for attachment in attachments:
        storage.delete(attachment["path"])
