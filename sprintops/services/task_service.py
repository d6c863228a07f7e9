from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from ..core.exceptions import NotFoundError, DomainValidationError
from ..models.base import is_storable_id
from ..models.task import Task
from ..models.bug import Bug
from ..models.user import User
from ..utils.logging import get_logger
from ..utils.time import utcnow, to_utc
from .task_rules import TaskState, initial_task_state, apply_task_update

logger = get_logger(__name__)


class TaskService:
    """Service for team-scoped task operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_team_tasks(self, team_id: int) -> List[Task]:
        """Get all tasks for a team, newest first"""

        stmt = (
            select(Task)
            .options(selectinload(Task.assigned_to))
            .where(Task.team_id == team_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
        )

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_task(self, task_id: int, team_id: int) -> Task:
        """Get a task of the caller's team; other teams' tasks do not exist here"""

        if not is_storable_id(task_id):
            raise NotFoundError("Task", task_id)

        stmt = (
            select(Task)
            .options(selectinload(Task.assigned_to), selectinload(Task.linked_bugs))
            .where(Task.id == task_id, Task.team_id == team_id)
            .execution_options(populate_existing=True)
        )

        result = await self.db.execute(stmt)
        task = result.scalar_one_or_none()

        if task is None:
            raise NotFoundError("Task", task_id)

        return task

    async def create_task(self, team_id: int, values: Dict[str, Any]) -> Task:
        """Create a task, applying the blocked-state creation rule"""

        values = dict(values)
        if "due_date" in values:
            values["due_date"] = to_utc(values["due_date"])

        await self._validate_assignee(team_id, values.get("assigned_to_id"))

        state = initial_task_state(values, now=utcnow())
        task = Task(team_id=team_id)
        state.apply_to(task)

        try:
            self.db.add(task)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create task for team {team_id}: {str(e)}")
            raise

        logger.info(f"Created task {task.id} for team {team_id}")
        return await self.get_task(task.id, team_id)

    async def update_task(self, task_id: int, team_id: int, changes: Dict[str, Any]) -> Task:
        """Apply a partial update; ``changes`` holds only the fields the caller sent"""

        task = await self.get_task(task_id, team_id)

        changes = dict(changes)
        if "due_date" in changes:
            changes["due_date"] = to_utc(changes["due_date"])
        if "assigned_to_id" in changes:
            await self._validate_assignee(team_id, changes["assigned_to_id"])

        previous_status = task.status
        new_state = apply_task_update(TaskState.from_model(task), changes, now=utcnow())
        new_state.apply_to(task)

        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update task {task_id}: {str(e)}")
            raise

        if previous_status != task.status:
            logger.info(f"Task {task_id} moved from {previous_status} to {task.status}")

        return await self.get_task(task_id, team_id)

    async def delete_task(self, task_id: int, team_id: int) -> None:
        """Hard-delete a task; bugs pointing at it are unlinked"""

        task = await self.get_task(task_id, team_id)

        try:
            await self.db.execute(
                update(Bug).where(Bug.linked_task_id == task.id).values(linked_task_id=None)
            )
            await self.db.delete(task)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {str(e)}")
            raise

        logger.info(f"Deleted task {task_id} from team {team_id}")

    async def _validate_assignee(self, team_id: int, user_id: Optional[int]) -> None:
        """Assignees must belong to the same team."""

        if user_id is None:
            return

        if not is_storable_id(user_id):
            raise DomainValidationError("Assignee is not a member of this team")

        stmt = select(User.id).where(User.id == user_id, User.team_id == team_id)
        result = await self.db.execute(stmt)

        if result.scalar_one_or_none() is None:
            raise DomainValidationError("Assignee is not a member of this team")
