"""Task domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.timeutils import to_local

TaskType = Literal[
    "WRITE_SUMMARY",
    "COLLECT_PAYMENT",
    "SIGN_DOCUMENT",
    "SCHEDULE_SESSION",
    "REVIEW_TRANSCRIPTION",
    "FOLLOW_UP",
    "CUSTOM",
]
TaskStatus = Literal["PENDING", "IN_PROGRESS", "COMPLETED", "CANCELLED"]
TaskPriority = Literal["LOW", "MEDIUM", "HIGH", "URGENT"]


class TaskCreate(BaseModel):
    type: TaskType = "CUSTOM"
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    priority: TaskPriority = "MEDIUM"
    dueDate: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("dueDate")
    @classmethod
    def normalize_due_date(cls, v):
        return to_local(v)


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    dueDate: Optional[datetime] = None

    @field_validator("dueDate")
    @classmethod
    def normalize_due_date(cls, v):
        return to_local(v)


class TaskResponse(BaseModel):
    id: int
    type: str
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    dueDate: Optional[datetime] = None
    relatedEntityId: Optional[int] = None
    relatedEntity: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, task) -> "TaskResponse":
        return cls(
            id=task.id,
            type=task.type,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            dueDate=task.due_date,
            relatedEntityId=task.related_entity_id,
            relatedEntity=task.related_entity,
            createdAt=task.created_at,
        )
