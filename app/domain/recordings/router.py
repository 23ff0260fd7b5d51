"""Recording router - recordings plus the transcription and analysis endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from .pipeline import RecordingPipeline
from .schemas import (
    AnalysisResponse,
    AnalyzeRequest,
    RecordingCreate,
    RecordingResponse,
    SummaryRequest,
    SummaryResponse,
    TranscribeRequest,
    TranscriptionResponse,
)
from .service import RecordingService

router = APIRouter(prefix="/recordings", tags=["Recordings"])
ai_router = APIRouter(tags=["AI"])


def get_recording_service(db: Session = Depends(get_db)) -> RecordingService:
    """Dependency injection for RecordingService"""
    return RecordingService(db)


def get_recording_pipeline(db: Session = Depends(get_db)) -> RecordingPipeline:
    return RecordingPipeline(db)


@router.get("", response_model=list[RecordingResponse])
async def get_recordings(
    clientId: Optional[int] = Query(None),
    sessionId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: RecordingService = Depends(get_recording_service),
):
    recordings = service.get_recordings(current_user, clientId, sessionId)
    return [RecordingResponse.from_model(r, include_transcription=False) for r in recordings]


@router.post("", response_model=RecordingResponse, status_code=201)
async def create_recording(
    data: RecordingCreate,
    current_user: User = Depends(get_current_user),
    service: RecordingService = Depends(get_recording_service),
):
    """Upload base64 audio for a client or session"""
    return RecordingResponse.from_model(service.create_recording(data, current_user))


@router.get("/{recording_id}", response_model=RecordingResponse)
async def get_recording(
    recording_id: int,
    current_user: User = Depends(get_current_user),
    service: RecordingService = Depends(get_recording_service),
):
    return RecordingResponse.from_model(service.get_recording(recording_id, current_user))


@router.delete("/{recording_id}", response_model=MessageResponse)
async def delete_recording(
    recording_id: int,
    current_user: User = Depends(get_current_user),
    service: RecordingService = Depends(get_recording_service),
):
    return service.delete_recording(recording_id, current_user)


@ai_router.post("/transcribe", response_model=TranscriptionResponse, status_code=201)
async def transcribe_recording(
    data: TranscribeRequest,
    current_user: User = Depends(get_current_user),
    pipeline: RecordingPipeline = Depends(get_recording_pipeline),
):
    """Transcribe a stored recording with Gemini"""
    transcription = await pipeline.transcribe(data.recordingId, current_user, data.withTimestamps)
    return TranscriptionResponse.from_model(transcription)


@ai_router.post("/analyze", response_model=AnalysisResponse, status_code=201)
async def analyze_transcription(
    data: AnalyzeRequest,
    current_user: User = Depends(get_current_user),
    pipeline: RecordingPipeline = Depends(get_recording_pipeline),
):
    """Analyze a transcription as an intake or a regular session"""
    analysis = await pipeline.analyze(data.transcriptionId, current_user, data.type)
    return AnalysisResponse.from_model(analysis)


@ai_router.post("/analyze/summary", response_model=SummaryResponse)
async def summarize_transcription(
    data: SummaryRequest,
    current_user: User = Depends(get_current_user),
    pipeline: RecordingPipeline = Depends(get_recording_pipeline),
):
    return SummaryResponse(summary=await pipeline.summarize(data.transcription))
