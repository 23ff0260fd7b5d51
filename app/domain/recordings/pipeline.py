"""
Transcription and analysis pipeline.

A recording moves PENDING -> TRANSCRIBING -> TRANSCRIBED -> ANALYZED. Any failure of the
external AI call flips it to ERROR and is reported as 500 (503 when the provider key is
missing). There is no retry; the therapist triggers the step again.
"""

import logging
from pathlib import PurePosixPath

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Analysis, Recording, Transcription, User
from ...services import ai_service
from ...services.ai_service import AIServiceNotConfigured
from ...storage import get_storage, key_from_url
from ..tasks.repository import TaskRepository
from .repository import RecordingRepository

logger = logging.getLogger(__name__)

AUDIO_MIME_TYPES = {
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".wav": "audio/wav",
}


def audio_mime_type(audio_url: str) -> str:
    return AUDIO_MIME_TYPES.get(PurePosixPath(audio_url).suffix.lower(), "audio/mpeg")


def _as_list(value) -> list:
    if isinstance(value, list):
        return value
    return [value] if value else []


def intake_to_analysis_fields(result: dict) -> dict:
    """Map an intake profile onto the session-analysis columns"""
    profile = result.get("clientProfile") or {}
    risk_factors = _as_list(result.get("riskFactors"))
    return {
        "summary": profile.get("background") or "",
        "key_topics": _as_list(profile.get("presentingIssues")),
        "emotional_markers": [],
        "recommendations": _as_list(result.get("recommendations")) + _as_list(profile.get("goals")),
        "next_session_notes": ", ".join(str(r) for r in risk_factors) or None,
    }


def session_to_analysis_fields(result: dict) -> dict:
    return {
        "summary": result.get("summary") or "",
        "key_topics": _as_list(result.get("keyTopics")),
        "emotional_markers": _as_list(result.get("emotionalMarkers")),
        "recommendations": _as_list(result.get("recommendations")),
        "next_session_notes": result.get("nextSessionNotes"),
    }


class RecordingPipeline:
    """Runs AI transcription and analysis for a therapist's recordings"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RecordingRepository()

    def _set_status(self, recording: Recording, status: str) -> None:
        recording.status = status
        self.db.commit()

    def _fail(self, recording: Recording, error: Exception, action: str) -> HTTPException:
        self.db.rollback()
        self._set_status(recording, "ERROR")
        if isinstance(error, AIServiceNotConfigured):
            logger.error(f"❌ {action} unavailable for recording {recording.id}: {error}")
            return HTTPException(status_code=503, detail=f"{action} service is not configured")
        logger.error(f"❌ {action} failed for recording {recording.id}: {error}")
        return HTTPException(status_code=500, detail=f"{action} failed")

    async def transcribe(self, recording_id: int, user: User, with_timestamps: bool = False) -> Transcription:
        recording = self.repo.get_recording_by_id(self.db, recording_id, user.id)
        if not recording:
            raise HTTPException(status_code=404, detail="Recording not found")

        self._set_status(recording, "TRANSCRIBING")
        logger.info(f"🎙️ Transcribing recording {recording.id}")

        try:
            audio = get_storage().read(key_from_url(recording.audio_url))
            mime_type = audio_mime_type(recording.audio_url)
            if with_timestamps:
                result = await ai_service.transcribe_audio_with_timestamps(audio, mime_type)
            else:
                result = await ai_service.transcribe_audio(audio, mime_type)
        except Exception as e:
            raise self._fail(recording, e, "Transcription") from e

        text = result["text"]
        transcription = self.repo.replace_transcription(
            self.db,
            recording,
            content=text,
            language="he",
            confidence=result.get("confidence", ai_service.DEFAULT_TRANSCRIPTION_CONFIDENCE),
            timestamps=result.get("segments"),
        )
        recording.status = "TRANSCRIBED"
        self.db.commit()
        self.db.refresh(transcription)

        logger.info(f"✅ Recording {recording.id} transcribed ({len(text)} chars)")
        return transcription

    def _owned_transcription(self, transcription_id: int, user: User) -> Transcription:
        transcription = self.repo.get_transcription(self.db, transcription_id)
        if not transcription:
            raise HTTPException(status_code=404, detail="Transcription not found")

        recording = transcription.recording
        owners = set()
        if recording.client is not None:
            owners.add(recording.client.therapist_id)
        if recording.session is not None:
            owners.add(recording.session.therapist_id)
        if user.id not in owners:
            raise HTTPException(status_code=403, detail="Access denied")
        return transcription

    async def analyze(self, transcription_id: int, user: User, analysis_type: str = "SESSION") -> Analysis:
        transcription = self._owned_transcription(transcription_id, user)
        recording = transcription.recording
        logger.info(f"🧠 Running {analysis_type} analysis for transcription {transcription.id}")

        try:
            if analysis_type == "INTAKE":
                fields = intake_to_analysis_fields(await ai_service.analyze_intake(transcription.content))
            else:
                fields = session_to_analysis_fields(await ai_service.analyze_session(transcription.content))
        except Exception as e:
            raise self._fail(recording, e, "Analysis") from e

        analysis = self.repo.replace_analysis(self.db, transcription, **fields)
        recording.status = "ANALYZED"
        completed = TaskRepository.complete_related_tasks(
            self.db, user.id, "REVIEW_TRANSCRIPTION", recording.id
        )
        self.db.commit()
        self.db.refresh(analysis)

        logger.info(f"✅ Recording {recording.id} analyzed, {completed} review task(s) completed")
        return analysis

    async def summarize(self, transcription_text: str) -> str:
        try:
            return await ai_service.generate_session_summary(transcription_text)
        except AIServiceNotConfigured as e:
            logger.error(f"❌ Summary unavailable: {e}")
            raise HTTPException(status_code=503, detail="Summary service is not configured") from e
        except Exception as e:
            logger.error(f"❌ Summary generation failed: {e}")
            raise HTTPException(status_code=500, detail="Summary generation failed") from e
