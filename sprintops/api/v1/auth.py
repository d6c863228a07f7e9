from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from ...database import get_db
from ...core.auth import SessionContext, create_access_token, get_current_session
from ...services.auth_service import AuthService
from .schemas import UserSummary, UserResponse

router = APIRouter()


class SignupRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    team_name: Optional[str] = Field(None, description="Defaults to \"<name>'s Team\"")

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        return value

    @field_validator("team_name")
    @classmethod
    def team_name_not_empty(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Team name is required")
        return value


class SignupResponse(BaseModel):
    message: str
    user: UserSummary


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup(
    request: SignupRequest,
    db: AsyncSession = Depends(get_db)
):
    """Create an account along with a new team it administers"""

    user, _team = await AuthService(db).signup(
        name=request.name,
        email=request.email,
        password=request.password,
        team_name=request.team_name
    )

    return {
        "message": "Account created successfully",
        "user": user
    }


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Exchange credentials for a bearer token"""

    user = await AuthService(db).authenticate(request.email, request.password)
    token = create_access_token({"sub": str(user.id)})

    return {
        "access_token": token,
        "token_type": "bearer",
        "user": user
    }


@router.get("/me", response_model=UserResponse)
async def get_me(
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Get the authenticated user"""

    return await AuthService(db).get_user(session.user_id)
