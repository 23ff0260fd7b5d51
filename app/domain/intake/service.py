"""Intake template service"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import IntakeTemplate, User
from .repository import IntakeTemplateRepository
from .schemas import IntakeTemplateCreate

logger = logging.getLogger(__name__)

# Asked when the therapist has not picked a template
DEFAULT_INTAKE_QUESTIONS = [
    "מה הביא אותך לפנות לטיפול עכשיו?",
    "תאר/י את הבעיה המרכזית שאת/ה חווה",
    "מתי הבעיה התחילה?",
    "האם קיבלת טיפול בעבר? אם כן, איזה סוג?",
    "האם אתה/את לוקח/ת תרופות? אם כן, אילו?",
    "מה הציפיות שלך מהטיפול?",
    "האם יש משהו נוסף שחשוב לי לדעת?",
]


class IntakeTemplateService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = IntakeTemplateRepository()

    def get_templates(self, user: User) -> list[IntakeTemplate]:
        return self.repo.get_templates(self.db, user.id)

    def create_template(self, data: IntakeTemplateCreate, user: User) -> IntakeTemplate:
        """Create a template; a new default replaces the previous one"""
        if data.isDefault:
            self.repo.clear_default(self.db, user.id)

        template = self.repo.create_template(
            self.db,
            user.id,
            name=data.name,
            questions=[q.model_dump() for q in data.questions],
            is_default=data.isDefault,
        )
        logger.info(f"📋 Intake template {template.id} created for user {user.id}")
        return template

    def delete_template(self, template_id: int, user: User) -> dict:
        template = self.repo.get_template_by_id(self.db, template_id, user.id)
        if not template:
            raise HTTPException(status_code=404, detail="Template not found")
        self.repo.delete_template(self.db, template)
        return {"message": "Template deleted"}
