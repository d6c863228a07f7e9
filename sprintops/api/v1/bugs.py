from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from pydantic import BaseModel, field_validator, ValidationInfo

from ...database import get_db
from ...core.auth import SessionContext, get_current_session
from ...models.enums import BugSeverity, BugStatus
from ...services.bug_service import BugService
from .schemas import BugResponse, MessageResponse

router = APIRouter()


class BugCreateRequest(BaseModel):
    title: str
    description: Optional[str] = None
    severity: BugSeverity = BugSeverity.MEDIUM
    status: BugStatus = BugStatus.OPEN
    linked_task_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value


class BugUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    severity: Optional[BugSeverity] = None
    status: Optional[BugStatus] = None
    linked_task_id: Optional[int] = None

    @field_validator("title", "severity", "status")
    @classmethod
    def not_nullable(cls, value, info: ValidationInfo):
        if value is None:
            raise ValueError(f"{info.field_name.capitalize()} cannot be null")
        if info.field_name == "title" and not value.strip():
            raise ValueError("Title cannot be empty")
        return value


@router.get("", response_model=List[BugResponse])
async def list_bugs(
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Get the caller's team bugs, newest first"""

    return await BugService(db).get_team_bugs(session.team_id)


@router.post("", response_model=BugResponse, status_code=201)
async def create_bug(
    request: BugCreateRequest,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Report a bug"""

    return await BugService(db).create_bug(session.team_id, request.model_dump())


@router.get("/{bug_id}", response_model=BugResponse)
async def get_bug(
    bug_id: int,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    return await BugService(db).get_bug(bug_id, session.team_id)


@router.patch("/{bug_id}", response_model=BugResponse)
async def update_bug(
    bug_id: int,
    request: BugUpdateRequest,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    return await BugService(db).update_bug(
        bug_id,
        session.team_id,
        request.model_dump(exclude_unset=True)
    )


@router.delete("/{bug_id}", response_model=MessageResponse)
async def delete_bug(
    bug_id: int,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    await BugService(db).delete_bug(bug_id, session.team_id)

    return {"message": "Bug deleted"}
