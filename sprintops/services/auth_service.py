from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError
from ..core.security import hash_password, verify_password
from ..models.user import User, Team
from ..models.enums import UserRole
from ..utils.logging import get_logger
from .team_service import email_exists

logger = get_logger(__name__)

SIGNUP_DUPLICATE_MESSAGE = "An account with this email already exists"


class AuthService:
    """Service for account creation and credential checks"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def signup(
        self,
        name: str,
        email: str,
        password: str,
        team_name: Optional[str] = None
    ) -> Tuple[User, Team]:
        """Create a team together with its first admin; both rows or neither"""

        if await email_exists(self.db, email):
            raise ConflictError(SIGNUP_DUPLICATE_MESSAGE)

        password_hash = hash_password(password)

        try:
            team = Team(name=team_name or f"{name}'s Team")
            self.db.add(team)
            await self.db.flush()

            user = User(
                email=email,
                password_hash=password_hash,
                name=name,
                role=UserRole.ADMIN.value,
                team_id=team.id,
            )
            self.db.add(user)
            await self.db.commit()

        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(SIGNUP_DUPLICATE_MESSAGE)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Signup failed for {email}: {str(e)}")
            raise

        logger.info(f"Created team {team.id} with admin {user.id}")
        return user, team

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials and return the matching user"""

        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt for {email}")
            raise AuthenticationError("Invalid email or password")

        return user

    async def get_user(self, user_id: int) -> User:
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()

        if user is None:
            raise NotFoundError("User", user_id)

        return user
