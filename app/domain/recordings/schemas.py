"""Recording domain schemas - recordings, transcriptions and analyses"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

RecordingType = Literal["INTAKE", "SESSION"]
AnalysisType = Literal["INTAKE", "SESSION"]


class RecordingCreate(BaseModel):
    audioData: str = Field(..., min_length=1, description="Base64 audio, optionally a data: URL")
    mimeType: Optional[str] = "audio/webm"
    durationSeconds: int = Field(..., ge=0)
    type: RecordingType = "SESSION"
    clientId: Optional[int] = None
    sessionId: Optional[int] = None


class TranscribeRequest(BaseModel):
    recordingId: int
    withTimestamps: bool = False


class AnalyzeRequest(BaseModel):
    transcriptionId: int
    type: AnalysisType = "SESSION"


class SummaryRequest(BaseModel):
    transcription: str = Field(..., min_length=1)


class SummaryResponse(BaseModel):
    summary: str


class AnalysisResponse(BaseModel):
    id: int
    transcriptionId: int
    summary: str
    keyTopics: Optional[list[Any]] = None
    emotionalMarkers: Optional[list[Any]] = None
    recommendations: Optional[list[Any]] = None
    nextSessionNotes: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, analysis) -> "AnalysisResponse":
        return cls(
            id=analysis.id,
            transcriptionId=analysis.transcription_id,
            summary=analysis.summary,
            keyTopics=analysis.key_topics,
            emotionalMarkers=analysis.emotional_markers,
            recommendations=analysis.recommendations,
            nextSessionNotes=analysis.next_session_notes,
            createdAt=analysis.created_at,
        )


class TranscriptionResponse(BaseModel):
    id: int
    recordingId: int
    content: str
    language: str
    confidence: Optional[float] = None
    timestamps: Optional[list[Any]] = None
    createdAt: Optional[datetime] = None
    analysis: Optional[AnalysisResponse] = None

    @classmethod
    def from_model(cls, transcription) -> "TranscriptionResponse":
        return cls(
            id=transcription.id,
            recordingId=transcription.recording_id,
            content=transcription.content,
            language=transcription.language,
            confidence=transcription.confidence,
            timestamps=transcription.timestamps,
            createdAt=transcription.created_at,
            analysis=(
                AnalysisResponse.from_model(transcription.analysis)
                if transcription.analysis
                else None
            ),
        )


class RecordingResponse(BaseModel):
    id: int
    audioUrl: str
    durationSeconds: int
    type: str
    status: str
    clientId: Optional[int] = None
    clientName: Optional[str] = None
    sessionId: Optional[int] = None
    createdAt: Optional[datetime] = None
    hasTranscription: bool = False
    hasAnalysis: bool = False
    transcription: Optional[TranscriptionResponse] = None

    @classmethod
    def from_model(cls, recording, include_transcription: bool = True) -> "RecordingResponse":
        transcription = None
        if include_transcription and recording.transcription:
            transcription = TranscriptionResponse.from_model(recording.transcription)
        return cls(
            id=recording.id,
            audioUrl=recording.audio_url,
            durationSeconds=recording.duration_seconds,
            type=recording.type,
            status=recording.status,
            clientId=recording.client_id,
            clientName=recording.client.name if recording.client else None,
            sessionId=recording.session_id,
            createdAt=recording.created_at,
            hasTranscription=recording.transcription is not None,
            hasAnalysis=bool(recording.transcription and recording.transcription.analysis),
            transcription=transcription,
        )
