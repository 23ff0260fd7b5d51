"""Authenticated download of uploaded recordings and documents"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..domain.documents.repository import DocumentRepository
from ..domain.recordings.repository import RecordingRepository
from ..models import User
from ..storage import UnsafePathError, content_type_for, get_storage, url_for_key, validate_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["Uploads"])


@router.get("/{file_path:path}")
async def get_upload(
    file_path: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Serve a stored file that belongs to one of the user's recordings or documents"""
    storage = get_storage()
    try:
        validate_key(file_path)
        exists = storage.exists(file_path)
    except UnsafePathError:
        logger.warning(f"⚠️ Blocked path traversal attempt by user {current_user.id}: {file_path!r}")
        raise HTTPException(status_code=403, detail="Access denied")

    if not exists:
        raise HTTPException(status_code=404, detail="File not found")

    url = url_for_key(file_path)
    owned = RecordingRepository.get_recording_by_audio_url(
        db, url, current_user.id
    ) or DocumentRepository.get_document_by_file_url(db, url, current_user.id)
    if not owned:
        logger.warning(f"⚠️ User {current_user.id} requested a file they do not own: {file_path}")
        raise HTTPException(status_code=403, detail="Access denied")

    try:
        content = storage.read(file_path)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail="File not found") from e

    return Response(
        content=content,
        media_type=content_type_for(file_path),
        headers={"Cache-Control": "private, max-age=3600"},
    )
