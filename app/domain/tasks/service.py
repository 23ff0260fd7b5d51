"""Task service - Business logic for the therapist's to-do list"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Task, User
from .repository import TaskRepository
from .schemas import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


class TaskService:
    """Service layer for task business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TaskRepository()

    def get_tasks(self, user: User, status: Optional[str] = None) -> list[Task]:
        return self.repo.get_tasks(self.db, user.id, status)

    def get_task(self, task_id: int, user: User) -> Task:
        task = self.repo.get_task_by_id(self.db, task_id, user.id)
        if not task:
            raise HTTPException(status_code=404, detail="Task not found")
        return task

    def create_task(self, data: TaskCreate, user: User) -> Task:
        task = self.repo.create_task(
            self.db,
            user.id,
            type=data.type,
            title=data.title,
            description=data.description,
            priority=data.priority,
            due_date=data.dueDate,
        )
        logger.info(f"📝 Task {task.id} ({task.type}) created for user {user.id}")
        return task

    def update_task(self, task_id: int, data: TaskUpdate, user: User) -> Task:
        task = self.get_task(task_id, user)

        field_map = {
            "title": "title",
            "description": "description",
            "status": "status",
            "priority": "priority",
            "dueDate": "due_date",
        }
        updates = {}
        for key, value in data.model_dump(exclude_unset=True).items():
            # description and dueDate may be cleared; the rest are required columns
            if value is None and key not in ("description", "dueDate"):
                continue
            updates[field_map[key]] = value
        return self.repo.update_task(self.db, task, **updates)

    def delete_task(self, task_id: int, user: User) -> dict:
        task = self.get_task(task_id, user)
        self.repo.delete_task(self.db, task)
        return {"message": "Task deleted"}
