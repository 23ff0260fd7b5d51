"""Intake template repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import IntakeTemplate


class IntakeTemplateRepository:
    @staticmethod
    def get_templates(db: Session, user_id: int) -> list[IntakeTemplate]:
        return (
            db.query(IntakeTemplate)
            .filter(IntakeTemplate.user_id == user_id)
            .order_by(IntakeTemplate.created_at.desc(), IntakeTemplate.id.desc())
            .all()
        )

    @staticmethod
    def get_template_by_id(db: Session, template_id: int, user_id: int) -> Optional[IntakeTemplate]:
        return (
            db.query(IntakeTemplate)
            .filter(IntakeTemplate.id == template_id, IntakeTemplate.user_id == user_id)
            .first()
        )

    @staticmethod
    def clear_default(db: Session, user_id: int) -> None:
        """Unset the default flag on every template of the user; the caller commits"""
        db.query(IntakeTemplate).filter(
            IntakeTemplate.user_id == user_id, IntakeTemplate.is_default.is_(True)
        ).update({"is_default": False}, synchronize_session=False)

    @staticmethod
    def create_template(db: Session, user_id: int, **template_data) -> IntakeTemplate:
        template = IntakeTemplate(user_id=user_id, **template_data)
        db.add(template)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def delete_template(db: Session, template: IntakeTemplate) -> None:
        db.delete(template)
        db.commit()
