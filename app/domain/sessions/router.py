"""Session router - FastAPI endpoints for therapy sessions"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from ...shared.timeutils import to_local
from .schemas import (
    SessionCreate,
    SessionDetailResponse,
    SessionNoteCreate,
    SessionNoteResponse,
    SessionNoteUpdate,
    SessionResponse,
    SessionUpdate,
)
from .service import SessionService

router = APIRouter(prefix="/sessions", tags=["Sessions"])


def get_session_service(db: Session = Depends(get_db)) -> SessionService:
    """Dependency injection for SessionService"""
    return SessionService(db)


@router.get("", response_model=list[SessionResponse])
async def get_sessions(
    clientId: Optional[int] = Query(None),
    startDate: Optional[datetime] = Query(None),
    endDate: Optional[datetime] = Query(None),
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """List sessions in start order; the date range applies only when both bounds are given"""
    sessions = service.get_sessions(current_user, clientId, to_local(startDate), to_local(endDate))
    return [SessionResponse.from_model(s) for s in sessions]


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    data: SessionCreate,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return SessionResponse.from_model(service.create_session(data, current_user))


@router.get("/{session_id}", response_model=SessionDetailResponse)
async def get_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return SessionDetailResponse.from_model(service.get_session_detail(session_id, current_user))


@router.put("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: int,
    data: SessionUpdate,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return SessionResponse.from_model(service.update_session(session_id, data, current_user))


@router.delete("/{session_id}", response_model=MessageResponse)
async def delete_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return service.delete_session(session_id, current_user)


@router.post("/{session_id}/note", response_model=SessionNoteResponse, status_code=201)
async def create_session_note(
    session_id: int,
    data: SessionNoteCreate,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """Add the session summary note"""
    return SessionNoteResponse.from_model(service.create_note(session_id, data, current_user))


@router.put("/{session_id}/note", response_model=SessionNoteResponse)
async def update_session_note(
    session_id: int,
    data: SessionNoteUpdate,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return SessionNoteResponse.from_model(service.update_note(session_id, data, current_user))
