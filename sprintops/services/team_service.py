from typing import Any, Dict, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError

from ..core.exceptions import NotFoundError, ConflictError, DomainValidationError
from ..core.security import hash_password, generate_temp_password
from ..models.base import is_storable_id
from ..models.user import User
from ..models.task import Task
from ..models.enums import UserRole, OPEN_TASK_STATUSES
from ..utils.logging import get_logger

logger = get_logger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A user with this email already exists"


async def email_exists(db: AsyncSession, email: str) -> bool:
    """Emails are unique across every team"""

    stmt = select(User.id).where(User.email == email)
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None


class TeamService:
    """Service for team membership operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_members(self, team_id: int) -> List[Tuple[User, int]]:
        """Members of a team, oldest first, with their count of unfinished assigned tasks"""

        active_count = (
            select(func.count(Task.id))
            .where(
                Task.assigned_to_id == User.id,
                Task.status.in_([status.value for status in OPEN_TASK_STATUSES]),
            )
            .correlate(User)
            .scalar_subquery()
        )

        stmt = (
            select(User, active_count.label("active_task_count"))
            .where(User.team_id == team_id)
            .order_by(User.created_at.asc(), User.id.asc())
        )

        result = await self.db.execute(stmt)
        return [(user, count or 0) for user, count in result.all()]

    async def get_member(self, member_id: int, team_id: int) -> User:
        """Get a member of the caller's team"""

        if not is_storable_id(member_id):
            raise NotFoundError("Member", member_id)

        stmt = select(User).where(User.id == member_id, User.team_id == team_id)
        result = await self.db.execute(stmt)
        member = result.scalar_one_or_none()

        if member is None:
            raise NotFoundError("Member", member_id)

        return member

    async def add_member(
        self,
        team_id: int,
        name: str,
        email: str,
        role: UserRole = UserRole.MEMBER
    ) -> Tuple[User, str]:
        """Create a member with a temporary password; returns the user and the plain password"""

        if await email_exists(self.db, email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        temp_password = generate_temp_password()
        member = User(
            name=name,
            email=email,
            password_hash=hash_password(temp_password),
            role=UserRole(role).value,
            team_id=team_id,
        )

        try:
            self.db.add(member)
            await self.db.commit()
        except IntegrityError:
            # Lost a race with another insert of the same email
            await self.db.rollback()
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to add member to team {team_id}: {str(e)}")
            raise

        await self.db.refresh(member)
        logger.info(f"Added member {member.id} to team {team_id} as {member.role}")
        return member, temp_password

    async def update_member(self, member_id: int, team_id: int, changes: Dict[str, Any]) -> User:
        """Rename a member or change their role"""

        member = await self.get_member(member_id, team_id)

        if "name" in changes:
            member.name = changes["name"]
        if "role" in changes:
            member.role = UserRole(changes["role"]).value

        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update member {member_id}: {str(e)}")
            raise

        await self.db.refresh(member)
        return member

    async def remove_member(self, member_id: int, team_id: int, acting_user_id: int) -> None:
        """Remove a member; their tasks stay with the team, unassigned"""

        if member_id == acting_user_id:
            raise DomainValidationError("You cannot remove yourself from the team")

        member = await self.get_member(member_id, team_id)

        try:
            await self.db.execute(
                update(Task).where(Task.assigned_to_id == member.id).values(assigned_to_id=None)
            )
            await self.db.delete(member)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove member {member_id}: {str(e)}")
            raise

        logger.info(f"Removed member {member_id} from team {team_id}")
