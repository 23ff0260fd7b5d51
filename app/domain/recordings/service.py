"""Recording service - storing uploaded session audio"""

import base64
import binascii
import logging
import uuid
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Recording, User
from ...storage import get_storage, key_from_url, url_for_key
from ..clients.repository import ClientRepository
from ..sessions.repository import SessionRepository
from ..tasks.repository import TaskRepository
from .repository import RecordingRepository
from .schemas import RecordingCreate

logger = logging.getLogger(__name__)


def decode_audio(audio_data: str) -> bytes:
    """Decode base64 audio, accepting a data: URL prefix"""
    if audio_data.startswith("data:") and "," in audio_data:
        audio_data = audio_data.split(",", 1)[1]
    try:
        decoded = base64.b64decode(audio_data.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(status_code=400, detail="Invalid audio data") from e
    if not decoded:
        raise HTTPException(status_code=400, detail="Invalid audio data")
    return decoded


def audio_extension(mime_type: Optional[str]) -> str:
    return "webm" if mime_type and "webm" in mime_type else "mp3"


class RecordingService:
    """Service layer for recording business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RecordingRepository()

    def get_recordings(
        self, user: User, client_id: Optional[int] = None, session_id: Optional[int] = None
    ) -> list[Recording]:
        return self.repo.get_recordings(self.db, user.id, client_id, session_id)

    def get_recording(self, recording_id: int, user: User) -> Recording:
        recording = self.repo.get_recording_by_id(self.db, recording_id, user.id)
        if not recording:
            raise HTTPException(status_code=404, detail="Recording not found")
        return recording

    def create_recording(self, data: RecordingCreate, user: User) -> Recording:
        """Store the audio file and register a PENDING recording"""
        client = None
        if data.clientId is not None:
            client = ClientRepository.get_client_by_id(self.db, data.clientId, user.id)
            if not client:
                raise HTTPException(status_code=404, detail="Client not found")
        if data.sessionId is not None:
            if not SessionRepository.get_session_by_id(self.db, data.sessionId, user.id):
                raise HTTPException(status_code=404, detail="Session not found")

        audio = decode_audio(data.audioData)
        key = f"recordings/{uuid.uuid4()}.{audio_extension(data.mimeType)}"
        get_storage().save(key, audio, data.mimeType)

        recording = self.repo.create_recording(
            self.db,
            client_id=data.clientId,
            session_id=data.sessionId,
            audio_url=url_for_key(key),
            duration_seconds=data.durationSeconds,
            type=data.type,
            status="PENDING",
        )
        self.db.flush()

        if client is not None:
            TaskRepository.add_task(
                self.db,
                user.id,
                type="REVIEW_TRANSCRIPTION",
                title=f"סקירת תמלול הקלטה - {client.name}",
                priority="MEDIUM",
                related_entity_id=recording.id,
                related_entity="Recording",
            )

        self.db.commit()
        self.db.refresh(recording)
        logger.info(f"🎙️ Recording {recording.id} stored ({len(audio)} bytes) at {key}")
        return recording

    def delete_recording(self, recording_id: int, user: User) -> dict:
        recording = self.get_recording(recording_id, user)
        key = key_from_url(recording.audio_url)
        self.repo.delete_recording(self.db, recording)
        get_storage().delete(key)
        logger.info(f"🗑️ Recording {recording_id} deleted by therapist {user.id}")
        return {"message": "Recording deleted"}
