"""Document router - FastAPI endpoints for client documents"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import MAX_DOCUMENT_SIZE_BYTES
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from .schemas import DocumentResponse, DocumentType, DocumentUpdate
from .service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["Documents"])


def get_document_service(db: Session = Depends(get_db)) -> DocumentService:
    """Dependency injection for DocumentService"""
    return DocumentService(db)


@router.get("", response_model=list[DocumentResponse])
async def get_documents(
    clientId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    return [DocumentResponse.from_model(d) for d in service.get_documents(current_user, clientId)]


@router.post("", response_model=DocumentResponse, status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    name: str = Form(..., min_length=1, max_length=255),
    type: DocumentType = Form("OTHER"),
    clientId: Optional[int] = Form(None),
    current_user: User = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    """Upload a document file (multipart form)"""
    logger.info(f"📤 Uploading document '{file.filename}' for user {current_user.id}")
    # Bounded read; the service rejects anything past the limit
    content = await file.read(MAX_DOCUMENT_SIZE_BYTES + 1)
    document = service.upload_document(
        current_user,
        content=content,
        filename=file.filename,
        content_type=file.content_type,
        name=name.strip(),
        document_type=type,
        client_id=clientId,
    )
    return DocumentResponse.from_model(document)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    return DocumentResponse.from_model(service.get_document(document_id, current_user))


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: int,
    data: DocumentUpdate,
    current_user: User = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    """Rename, retype, reassign or sign a document"""
    return DocumentResponse.from_model(service.update_document(document_id, data, current_user))


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    return service.delete_document(document_id, current_user)
