"""Task router - FastAPI endpoints for tasks"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from .schemas import TaskCreate, TaskResponse, TaskStatus, TaskUpdate
from .service import TaskService

router = APIRouter(prefix="/tasks", tags=["Tasks"])


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    """Dependency injection for TaskService"""
    return TaskService(db)


@router.get("", response_model=list[TaskResponse])
async def get_tasks(
    status: Optional[TaskStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """List tasks, most urgent first"""
    return [TaskResponse.from_model(t) for t in service.get_tasks(current_user, status)]


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    data: TaskCreate,
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return TaskResponse.from_model(service.create_task(data, current_user))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    data: TaskUpdate,
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return TaskResponse.from_model(service.update_task(task_id, data, current_user))


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: int,
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return service.delete_task(task_id, current_user)
