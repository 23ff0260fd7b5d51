"""Recurring pattern repository"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import RecurringPattern


class RecurringPatternRepository:
    @staticmethod
    def get_patterns(db: Session, user_id: int, active_only: bool = False) -> list[RecurringPattern]:
        query = (
            db.query(RecurringPattern)
            .options(joinedload(RecurringPattern.client))
            .filter(RecurringPattern.user_id == user_id)
        )
        if active_only:
            query = query.filter(RecurringPattern.is_active.is_(True))
        return query.order_by(RecurringPattern.day_of_week.asc(), RecurringPattern.time.asc()).all()

    @staticmethod
    def get_pattern_by_id(db: Session, pattern_id: int, user_id: int) -> Optional[RecurringPattern]:
        return (
            db.query(RecurringPattern)
            .filter(RecurringPattern.id == pattern_id, RecurringPattern.user_id == user_id)
            .first()
        )

    @staticmethod
    def create_pattern(db: Session, user_id: int, **pattern_data) -> RecurringPattern:
        pattern = RecurringPattern(user_id=user_id, **pattern_data)
        db.add(pattern)
        db.commit()
        db.refresh(pattern)
        return pattern

    @staticmethod
    def update_pattern(db: Session, pattern: RecurringPattern, **updates) -> RecurringPattern:
        for key, value in updates.items():
            if hasattr(pattern, key):
                setattr(pattern, key, value)
        db.commit()
        db.refresh(pattern)
        return pattern

    @staticmethod
    def delete_pattern(db: Session, pattern: RecurringPattern) -> None:
        db.delete(pattern)
        db.commit()
