from dataclasses import dataclass
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..config import settings
from ..database import get_db
from ..models.base import is_storable_id
from ..models.user import User
from ..models.enums import UserRole
from .exceptions import AuthenticationError, PermissionDeniedError

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionContext:
    """Identity of the caller, resolved once per request from the bearer token."""

    user_id: int
    team_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    return encoded_jwt


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> SessionContext:
    """Resolve the authenticated caller from the JWT bearer token"""

    if credentials is None:
        raise AuthenticationError()

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.secret_key,
            algorithms=[settings.algorithm]
        )
        subject = payload.get("sub")
        if subject is None:
            raise AuthenticationError()
        user_id = int(subject)
        if not is_storable_id(user_id):
            raise AuthenticationError()

    except (JWTError, ValueError):
        raise AuthenticationError()

    # The user may have been removed since the token was issued
    stmt = select(User).where(User.id == user_id)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None:
        raise AuthenticationError()

    return SessionContext(user_id=user.id, team_id=user.team_id, role=UserRole(user.role))


def require_admin(
    session: SessionContext = Depends(get_current_session)
) -> SessionContext:
    """Dependency to ensure current user is a team admin"""

    if not session.is_admin:
        raise PermissionDeniedError("Only admins can manage team members")

    return session
