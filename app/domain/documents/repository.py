"""Document repository - Database operations for client documents"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Document


class DocumentRepository:
    """Repository for document database operations"""

    @staticmethod
    def get_documents(db: Session, therapist_id: int, client_id: Optional[int] = None) -> list[Document]:
        query = (
            db.query(Document)
            .options(joinedload(Document.client))
            .filter(Document.therapist_id == therapist_id)
        )
        if client_id:
            query = query.filter(Document.client_id == client_id)
        return query.order_by(Document.created_at.desc(), Document.id.desc()).all()

    @staticmethod
    def get_document_by_id(db: Session, document_id: int, therapist_id: int) -> Optional[Document]:
        return (
            db.query(Document)
            .filter(Document.id == document_id, Document.therapist_id == therapist_id)
            .first()
        )

    @staticmethod
    def get_document_by_file_url(db: Session, file_url: str, therapist_id: int) -> Optional[Document]:
        return (
            db.query(Document)
            .filter(Document.file_url == file_url, Document.therapist_id == therapist_id)
            .first()
        )

    @staticmethod
    def create_document(db: Session, therapist_id: int, **document_data) -> Document:
        document = Document(therapist_id=therapist_id, **document_data)
        db.add(document)
        db.commit()
        db.refresh(document)
        return document

    @staticmethod
    def update_document(db: Session, document: Document, **updates) -> Document:
        for key, value in updates.items():
            if hasattr(document, key):
                setattr(document, key, value)
        db.commit()
        db.refresh(document)
        return document

    @staticmethod
    def delete_document(db: Session, document: Document) -> None:
        db.delete(document)
        db.commit()
