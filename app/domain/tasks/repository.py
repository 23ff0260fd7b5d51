"""Task repository - Database operations for tasks"""

from typing import Optional

from sqlalchemy import case
from sqlalchemy.orm import Session

from ...models import Task

OPEN_STATUSES = ("PENDING", "IN_PROGRESS")

PRIORITY_RANK = {"LOW": 0, "MEDIUM": 1, "HIGH": 2, "URGENT": 3}

priority_rank = case(PRIORITY_RANK, value=Task.priority, else_=0)


class TaskRepository:
    """Repository for task database operations"""

    @staticmethod
    def get_tasks(db: Session, user_id: int, status: Optional[str] = None) -> list[Task]:
        """Most urgent first, then earliest due date (undated last), then newest"""
        query = db.query(Task).filter(Task.user_id == user_id)
        if status:
            query = query.filter(Task.status == status)
        return query.order_by(
            priority_rank.desc(),
            Task.due_date.is_(None),
            Task.due_date.asc(),
            Task.created_at.desc(),
        ).all()

    @staticmethod
    def get_open_tasks(db: Session, user_id: int, limit: Optional[int] = None) -> list[Task]:
        query = (
            db.query(Task)
            .filter(Task.user_id == user_id, Task.status.in_(OPEN_STATUSES))
            .order_by(priority_rank.desc(), Task.created_at.asc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def count_open_tasks(db: Session, user_id: int) -> int:
        return db.query(Task).filter(Task.user_id == user_id, Task.status.in_(OPEN_STATUSES)).count()

    @staticmethod
    def get_task_by_id(db: Session, task_id: int, user_id: int) -> Optional[Task]:
        return db.query(Task).filter(Task.id == task_id, Task.user_id == user_id).first()

    @staticmethod
    def add_task(db: Session, user_id: int, **task_data) -> Task:
        """Stage a task in the current transaction; the caller commits"""
        task = Task(user_id=user_id, **task_data)
        db.add(task)
        return task

    @staticmethod
    def create_task(db: Session, user_id: int, **task_data) -> Task:
        task = TaskRepository.add_task(db, user_id, **task_data)
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def complete_related_tasks(
        db: Session, user_id: int, task_type: str, related_entity_id: int
    ) -> int:
        """Mark open tasks of a type for one related entity as completed; the caller commits"""
        tasks = (
            db.query(Task)
            .filter(
                Task.user_id == user_id,
                Task.type == task_type,
                Task.related_entity_id == related_entity_id,
                Task.status.in_(OPEN_STATUSES),
            )
            .all()
        )
        for task in tasks:
            task.status = "COMPLETED"
        return len(tasks)

    @staticmethod
    def update_task(db: Session, task: Task, **updates) -> Task:
        for key, value in updates.items():
            if hasattr(task, key):
                setattr(task, key, value)
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def delete_task(db: Session, task: Task) -> None:
        db.delete(task)
        db.commit()
