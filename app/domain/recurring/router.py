"""Recurring pattern router"""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from .schemas import (
    ApplyPatternsRequest,
    ApplyPatternsResponse,
    RecurringPatternCreate,
    RecurringPatternResponse,
    RecurringPatternUpdate,
)
from .service import RecurringPatternService

router = APIRouter(prefix="/recurring-patterns", tags=["Recurring Patterns"])


def get_recurring_service(db: Session = Depends(get_db)) -> RecurringPatternService:
    """Dependency injection for RecurringPatternService"""
    return RecurringPatternService(db)


@router.get("", response_model=list[RecurringPatternResponse])
async def get_patterns(
    current_user: User = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_recurring_service),
):
    return [RecurringPatternResponse.from_model(p) for p in service.get_patterns(current_user)]


@router.post("", response_model=RecurringPatternResponse, status_code=201)
async def create_pattern(
    data: RecurringPatternCreate,
    current_user: User = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_recurring_service),
):
    return RecurringPatternResponse.from_model(service.create_pattern(data, current_user))


@router.post("/apply", response_model=ApplyPatternsResponse)
async def apply_patterns(
    data: Optional[ApplyPatternsRequest] = Body(None),
    current_user: User = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_recurring_service),
):
    """Create sessions from the active patterns for the next weeks"""
    weeks_ahead = data.weeksAhead if data else 4
    return service.apply_patterns(current_user, weeks_ahead)


@router.put("/{pattern_id}", response_model=RecurringPatternResponse)
async def update_pattern(
    pattern_id: int,
    data: RecurringPatternUpdate,
    current_user: User = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_recurring_service),
):
    return RecurringPatternResponse.from_model(service.update_pattern(pattern_id, data, current_user))


@router.delete("/{pattern_id}", response_model=MessageResponse)
async def delete_pattern(
    pattern_id: int,
    current_user: User = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_recurring_service),
):
    return service.delete_pattern(pattern_id, current_user)
