from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ..core.exceptions import NotFoundError, DomainValidationError
from ..models.base import is_storable_id
from ..models.bug import Bug
from ..models.task import Task
from ..models.enums import BugSeverity, BugStatus
from ..utils.logging import get_logger

logger = get_logger(__name__)

UPDATABLE_FIELDS = ("title", "description", "severity", "status", "linked_task_id")


class BugService:
    """Service for team-scoped bug operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_team_bugs(self, team_id: int) -> List[Bug]:
        """Get all bugs for a team, newest first"""

        stmt = (
            select(Bug)
            .options(selectinload(Bug.linked_task))
            .where(Bug.team_id == team_id)
            .order_by(Bug.created_at.desc(), Bug.id.desc())
        )

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_bug(self, bug_id: int, team_id: int) -> Bug:
        """Get a bug of the caller's team"""

        if not is_storable_id(bug_id):
            raise NotFoundError("Bug", bug_id)

        stmt = (
            select(Bug)
            .options(selectinload(Bug.linked_task))
            .where(Bug.id == bug_id, Bug.team_id == team_id)
            .execution_options(populate_existing=True)
        )

        result = await self.db.execute(stmt)
        bug = result.scalar_one_or_none()

        if bug is None:
            raise NotFoundError("Bug", bug_id)

        return bug

    async def create_bug(self, team_id: int, values: Dict[str, Any]) -> Bug:
        """Create a bug"""

        await self._validate_linked_task(team_id, values.get("linked_task_id"))

        bug = Bug(
            title=values["title"],
            description=values.get("description"),
            severity=BugSeverity(values.get("severity") or BugSeverity.MEDIUM).value,
            status=BugStatus(values.get("status") or BugStatus.OPEN).value,
            linked_task_id=values.get("linked_task_id"),
            team_id=team_id,
        )

        try:
            self.db.add(bug)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create bug for team {team_id}: {str(e)}")
            raise

        logger.info(f"Created bug {bug.id} for team {team_id}")
        return await self.get_bug(bug.id, team_id)

    async def update_bug(self, bug_id: int, team_id: int, changes: Dict[str, Any]) -> Bug:
        """Plain field-by-field update; bugs have no derived fields"""

        bug = await self.get_bug(bug_id, team_id)

        if "linked_task_id" in changes:
            await self._validate_linked_task(team_id, changes["linked_task_id"])

        for key in UPDATABLE_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if isinstance(value, (BugSeverity, BugStatus)):
                value = value.value
            setattr(bug, key, value)

        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update bug {bug_id}: {str(e)}")
            raise

        return await self.get_bug(bug_id, team_id)

    async def delete_bug(self, bug_id: int, team_id: int) -> None:
        """Hard-delete a bug"""

        bug = await self.get_bug(bug_id, team_id)

        try:
            await self.db.delete(bug)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete bug {bug_id}: {str(e)}")
            raise

        logger.info(f"Deleted bug {bug_id} from team {team_id}")

    async def _validate_linked_task(self, team_id: int, task_id: Optional[int]) -> None:
        """Bugs may only link to tasks of the same team."""

        if task_id is None:
            return

        if not is_storable_id(task_id):
            raise DomainValidationError("Linked task not found")

        stmt = select(Task.id).where(Task.id == task_id, Task.team_id == team_id)
        result = await self.db.execute(stmt)

        if result.scalar_one_or_none() is None:
            raise DomainValidationError("Linked task not found")
