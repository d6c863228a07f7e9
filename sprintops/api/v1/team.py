from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator, ValidationInfo

from ...database import get_db
from ...core.auth import SessionContext, get_current_session, require_admin
from ...models.enums import UserRole
from ...utils.time import UTCDateTime
from ...services.team_service import TeamService
from .schemas import MessageResponse

router = APIRouter()


class MemberCreateRequest(BaseModel):
    name: str
    email: EmailStr
    role: UserRole = UserRole.MEMBER

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value


class MemberUpdateRequest(BaseModel):
    name: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator("name", "role")
    @classmethod
    def not_nullable(cls, value, info: ValidationInfo):
        if value is None:
            raise ValueError(f"{info.field_name.capitalize()} cannot be null")
        if info.field_name == "name" and not value.strip():
            raise ValueError("Name cannot be empty")
        return value


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: UserRole
    created_at: UTCDateTime


class MemberWithLoadResponse(MemberResponse):
    active_task_count: int


class MemberCreatedResponse(MemberResponse):
    temp_password: str


@router.get("", response_model=List[MemberWithLoadResponse])
async def list_members(
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Get team members with their unfinished task counts"""

    members = await TeamService(db).get_members(session.team_id)

    return [
        MemberWithLoadResponse(
            **MemberResponse.model_validate(user).model_dump(),
            active_task_count=count,
        )
        for user, count in members
    ]


@router.post("", response_model=MemberCreatedResponse, status_code=201)
async def add_member(
    request: MemberCreateRequest,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(require_admin)
):
    """Add a member with a generated temporary password (admins only)"""

    member, temp_password = await TeamService(db).add_member(
        team_id=session.team_id,
        name=request.name,
        email=request.email,
        role=request.role
    )

    return MemberCreatedResponse(
        **MemberResponse.model_validate(member).model_dump(),
        temp_password=temp_password,
    )


@router.patch("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: int,
    request: MemberUpdateRequest,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(require_admin)
):
    """Rename a member or change their role (admins only)"""

    return await TeamService(db).update_member(
        member_id,
        session.team_id,
        request.model_dump(exclude_unset=True)
    )


@router.delete("/{member_id}", response_model=MessageResponse)
async def remove_member(
    member_id: int,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(require_admin)
):
    """Remove a member (admins only, never yourself)"""

    await TeamService(db).remove_member(member_id, session.team_id, acting_user_id=session.user_id)

    return {"message": "Member removed"}
