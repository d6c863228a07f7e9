from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, field_validator, ValidationInfo

from ...database import get_db
from ...core.auth import SessionContext, get_current_session
from ...models.enums import TaskStatus, TaskPriority
from ...services.task_service import TaskService
from .schemas import TaskResponse, TaskDetailResponse, MessageResponse

router = APIRouter()


class TaskCreateRequest(BaseModel):
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None
    block_reason: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value


class TaskUpdateRequest(BaseModel):
    """Partial update: only fields present in the body are applied"""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None
    block_reason: Optional[str] = None

    @field_validator("title", "status", "priority")
    @classmethod
    def not_nullable(cls, value, info: ValidationInfo):
        # Defaults are not validated, so this only sees values the client sent
        if value is None:
            raise ValueError(f"{info.field_name.capitalize()} cannot be null")
        if info.field_name == "title" and not value.strip():
            raise ValueError("Title cannot be empty")
        return value


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Get the caller's team tasks, newest first"""

    return await TaskService(db).get_team_tasks(session.team_id)


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    request: TaskCreateRequest,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Create a task in the caller's team"""

    return await TaskService(db).create_task(session.team_id, request.model_dump())


@router.get("/{task_id}", response_model=TaskDetailResponse)
async def get_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Get task details with linked bugs"""

    return await TaskService(db).get_task(task_id, session.team_id)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    request: TaskUpdateRequest,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Partially update a task, keeping blocker bookkeeping consistent"""

    return await TaskService(db).update_task(
        task_id,
        session.team_id,
        request.model_dump(exclude_unset=True)
    )


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Delete a task"""

    await TaskService(db).delete_task(task_id, session.team_id)

    return {"message": "Task deleted"}
