from typing import List, Optional
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ..models.task import Task
from ..models.bug import Bug
from ..utils.logging import get_logger
from .metrics import (
    AnalyticsPeriod,
    AnalyticsSeries,
    SnapshotMetrics,
    compute_analytics,
    compute_snapshot,
)

logger = get_logger(__name__)


class StatsService:
    """Team metrics, recomputed from the full task and bug set on every call"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_snapshot(self, team_id: int, now: Optional[datetime] = None) -> SnapshotMetrics:
        tasks = await self._get_tasks(team_id)
        bugs = await self._get_bugs(team_id)

        return compute_snapshot(tasks, bugs, now=now or self._local_now())

    async def get_analytics(
        self,
        team_id: int,
        period: AnalyticsPeriod = AnalyticsPeriod.WEEK,
        now: Optional[datetime] = None
    ) -> AnalyticsSeries:
        tasks = await self._get_tasks(team_id)
        bugs = await self._get_bugs(team_id)

        logger.debug(
            f"Computing {period.value} analytics for team {team_id} "
            f"over {len(tasks)} tasks and {len(bugs)} bugs"
        )
        return compute_analytics(tasks, bugs, period=period, now=now or self._local_now())

    async def _get_tasks(self, team_id: int) -> List[Task]:
        stmt = (
            select(Task)
            .options(selectinload(Task.assigned_to))
            .where(Task.team_id == team_id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _get_bugs(self, team_id: int) -> List[Bug]:
        stmt = select(Bug).where(Bug.team_id == team_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    def _local_now() -> datetime:
        # Day buckets follow the server's local calendar
        return datetime.now().astimezone()
