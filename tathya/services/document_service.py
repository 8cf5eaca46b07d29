"""Personal documents: upload, metadata edits, download and verification.

Documents are private to their owner; moderators may read and verify them.
Files are kept in the document storage, which the app never mounts.
"""
from datetime import datetime
from pathlib import Path, PurePath
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.core.errors import NotFoundError, UnauthorizedError, ValidationError
from tathya.models.document import Document
from tathya.models.user import User
from tathya.schemas.document import DocumentResponse, DocumentUpdate
from tathya.services.attachment_service import read_attachments, store_attachments
from tathya.services.storage_service import StorageBackend


def _size_label(size: int) -> str:
    return f"{size / (1024 * 1024):.2f} MB"


async def get_document_for_viewer(db: AsyncSession, document_id: UUID, viewer: User) -> Document:
    result = await db.execute(select(Document).where(Document.id == document_id))
    document = result.scalar_one_or_none()
    if document is None or not (viewer.is_moderator or document.user_id == viewer.id):
        raise NotFoundError("Document not found")
    return document


async def read_upload(
    file: UploadFile | None,
    name: str | None,
    doc_type: str | None,
) -> tuple[str, str, list[tuple[UploadFile, bytes]]]:
    """Validate the form before anything is stored."""
    if file is None or not file.filename:
        raise ValidationError("Please upload a file")
    name, doc_type = (name or "").strip(), (doc_type or "").strip()
    if not name or not doc_type:
        raise ValidationError("Please provide document name and type")
    loaded = await read_attachments([file], max_files=1, owner="document")
    return name, doc_type, loaded


def store_upload(storage: StorageBackend, user: User, loaded: list[tuple[UploadFile, bytes]]) -> dict:
    [stored] = store_attachments(storage, str(user.id), loaded, kind="documents")
    return stored


async def create_document(db: AsyncSession, user: User, name: str, doc_type: str, stored: dict) -> Document:
    document = Document(
        user_id=user.id,
        name=name,
        type=doc_type.upper(),
        filename=stored["filename"],
        path=stored["path"],
        mimetype=stored["mimetype"] or "application/octet-stream",
        size=stored["size"],
    )
    db.add(document)
    await db.flush()
    return document


async def list_own(db: AsyncSession, user: User) -> list[Document]:
    result = await db.execute(
        select(Document).where(Document.user_id == user.id).order_by(desc(Document.created_at))
    )
    return list(result.scalars().all())


async def _get_owned(db: AsyncSession, document_id: UUID, user: User, action: str) -> Document:
    document = await get_document_for_viewer(db, document_id, user)
    if document.user_id != user.id:
        raise UnauthorizedError(f"Not authorized to {action} this document")
    return document


async def update_document(db: AsyncSession, document_id: UUID, user: User, data: DocumentUpdate) -> Document:
    document = await _get_owned(db, document_id, user, "update")
    if data.name is not None and data.name.strip():
        document.name = data.name.strip()
    if data.type is not None and data.type.strip():
        document.type = data.type.strip().upper()
    document.updated_at = datetime.utcnow()
    await db.flush()
    return document


async def delete_document(db: AsyncSession, document_id: UUID, user: User) -> str:
    """Returns the storage path so the caller can remove the file after commit."""
    document = await _get_owned(db, document_id, user, "delete")
    path = document.path
    await db.delete(document)
    await db.flush()
    return path


async def verify_document(db: AsyncSession, document_id: UUID, moderator: User, status: str) -> Document:
    document = await get_document_for_viewer(db, document_id, moderator)
    document.status = status
    document.updated_at = datetime.utcnow()
    await db.flush()
    return document


def download_name(document: Document) -> str:
    suffix = PurePath(document.filename).suffix or f".{document.type.lower()}"
    return f"{document.name}{suffix}"


def document_file(storage: StorageBackend, document: Document) -> Path:
    filepath = storage.local_path(document.path)
    if filepath is None:
        raise NotFoundError("Document file not found on server")
    return filepath


def document_to_response(document: Document) -> DocumentResponse:
    return DocumentResponse(
        id=document.id,
        name=document.name,
        type=document.type,
        filename=document.filename,
        mimetype=document.mimetype,
        size=document.size,
        size_label=_size_label(document.size),
        status=document.status,
        created_at=document.created_at,
        updated_at=document.updated_at,
    )
