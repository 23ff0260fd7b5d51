"""Document service - uploading and signing client documents"""

import logging
import re
import uuid
from pathlib import PurePosixPath
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import MAX_DOCUMENT_SIZE_BYTES
from ...models import Document, User
from ...shared.timeutils import local_now
from ...storage import get_storage, key_from_url, url_for_key
from ..clients.repository import ClientRepository
from .repository import DocumentRepository
from .schemas import DocumentUpdate

logger = logging.getLogger(__name__)

EXTENSION_PATTERN = re.compile(r"^[a-z0-9]{1,10}$")


def file_extension(filename: Optional[str]) -> str:
    """Extension of the uploaded file name, 'bin' when missing or unusable"""
    suffix = PurePosixPath((filename or "").replace("\\", "/")).suffix.lstrip(".").lower()
    return suffix if EXTENSION_PATTERN.match(suffix) else "bin"


class DocumentService:
    """Service layer for document business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DocumentRepository()

    def _require_client(self, client_id: int, user: User) -> None:
        if not ClientRepository.get_client_by_id(self.db, client_id, user.id):
            raise HTTPException(status_code=404, detail="Client not found")

    def get_documents(self, user: User, client_id: Optional[int] = None) -> list[Document]:
        return self.repo.get_documents(self.db, user.id, client_id)

    def get_document(self, document_id: int, user: User) -> Document:
        document = self.repo.get_document_by_id(self.db, document_id, user.id)
        if not document:
            raise HTTPException(status_code=404, detail="Document not found")
        return document

    def upload_document(
        self,
        user: User,
        content: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        name: str,
        document_type: str,
        client_id: Optional[int] = None,
    ) -> Document:
        if client_id is not None:
            self._require_client(client_id, user)

        if len(content) > MAX_DOCUMENT_SIZE_BYTES:
            max_mb = MAX_DOCUMENT_SIZE_BYTES // (1024 * 1024)
            raise HTTPException(status_code=400, detail=f"File too large. Maximum size is {max_mb}MB")

        key = f"documents/{uuid.uuid4()}.{file_extension(filename)}"
        get_storage().save(key, content, content_type)

        document = self.repo.create_document(
            self.db,
            user.id,
            client_id=client_id,
            name=name,
            type=document_type,
            file_url=url_for_key(key),
            signed=False,
        )
        logger.info(f"📄 Document {document.id} uploaded ({len(content)} bytes) at {key}")
        return document

    def update_document(self, document_id: int, data: DocumentUpdate, user: User) -> Document:
        document = self.get_document(document_id, user)
        updates = {}

        if data.name is not None:
            updates["name"] = data.name.strip()
        if data.type is not None:
            updates["type"] = data.type
        if data.clientId is not None:
            self._require_client(data.clientId, user)
            updates["client_id"] = data.clientId
        if data.signed is not None and data.signed != document.signed:
            updates["signed"] = data.signed
            updates["signed_at"] = local_now() if data.signed else None

        return self.repo.update_document(self.db, document, **updates)

    def delete_document(self, document_id: int, user: User) -> dict:
        document = self.get_document(document_id, user)
        key = key_from_url(document.file_url)
        self.repo.delete_document(self.db, document)
        get_storage().delete(key)
        return {"message": "Document deleted"}
