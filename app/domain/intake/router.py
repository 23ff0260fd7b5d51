"""Intake template router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from .schemas import DefaultQuestionsResponse, IntakeTemplateCreate, IntakeTemplateResponse
from .service import DEFAULT_INTAKE_QUESTIONS, IntakeTemplateService

router = APIRouter(prefix="/intake-templates", tags=["Intake"])


def get_intake_service(db: Session = Depends(get_db)) -> IntakeTemplateService:
    """Dependency injection for IntakeTemplateService"""
    return IntakeTemplateService(db)


@router.get("", response_model=list[IntakeTemplateResponse])
async def get_templates(
    current_user: User = Depends(get_current_user),
    service: IntakeTemplateService = Depends(get_intake_service),
):
    return [IntakeTemplateResponse.from_model(t) for t in service.get_templates(current_user)]


@router.get("/default-questions", response_model=DefaultQuestionsResponse)
async def get_default_questions(current_user: User = Depends(get_current_user)):
    """Built-in questions used when no template is selected"""
    return DefaultQuestionsResponse(questions=DEFAULT_INTAKE_QUESTIONS)


@router.post("", response_model=IntakeTemplateResponse, status_code=201)
async def create_template(
    data: IntakeTemplateCreate,
    current_user: User = Depends(get_current_user),
    service: IntakeTemplateService = Depends(get_intake_service),
):
    return IntakeTemplateResponse.from_model(service.create_template(data, current_user))


@router.delete("/{template_id}", response_model=MessageResponse)
async def delete_template(
    template_id: int,
    current_user: User = Depends(get_current_user),
    service: IntakeTemplateService = Depends(get_intake_service),
):
    return service.delete_template(template_id, current_user)
