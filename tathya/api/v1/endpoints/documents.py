"""Personal documents: upload, listing, metadata, download and verification."""
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.api.deps import get_db, get_current_moderator, get_current_user
from tathya.models.user import User
from tathya.schemas.document import DocumentResponse, DocumentUpdate, DocumentVerify
from tathya.services import document_service
from tathya.services.storage_service import get_document_storage

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    name: str = Form(""),
    doc_type: str = Form("", alias="type"),
    document: UploadFile | None = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    name, doc_type, loaded = await document_service.read_upload(document, name, doc_type)
    storage = get_document_storage()
    stored = document_service.store_upload(storage, current_user, loaded)
    try:
        created = await document_service.create_document(db, current_user, name, doc_type, stored)
        await db.commit()
    except Exception:
        storage.delete(stored["path"])
        raise
    print(f"[Documents] Uploaded: {created.id} by {current_user.id}")
    return document_service.document_to_response(created)


@router.get("/my-documents", response_model=list[DocumentResponse])
async def my_documents(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    documents = await document_service.list_own(db, current_user)
    return [document_service.document_to_response(d) for d in documents]


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    document = await document_service.get_document_for_viewer(db, document_id, current_user)
    return document_service.document_to_response(document)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: UUID,
    data: DocumentUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    document = await document_service.update_document(db, document_id, current_user, data)
    await db.commit()
    return document_service.document_to_response(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    path = await document_service.delete_document(db, document_id, current_user)
    await db.commit()
    get_document_storage().delete(path)
    return None


@router.get("/{document_id}/download")
async def download_document(
    document_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    document = await document_service.get_document_for_viewer(db, document_id, current_user)
    filepath = document_service.document_file(get_document_storage(), document)
    return FileResponse(
        filepath,
        media_type="application/octet-stream",
        filename=document_service.download_name(document),
    )


@router.put("/{document_id}/verify", response_model=DocumentResponse)
async def verify_document(
    document_id: UUID,
    data: DocumentVerify,
    moderator: User = Depends(get_current_moderator),
    db: AsyncSession = Depends(get_db),
):
    document = await document_service.verify_document(db, document_id, moderator, data.status)
    await db.commit()
    return document_service.document_to_response(document)
