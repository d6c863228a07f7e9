from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ...core.auth import SessionContext, get_current_session
from ...services.metrics import AnalyticsPeriod, AnalyticsSeries, SnapshotMetrics
from ...services.stats_service import StatsService

router = APIRouter()


@router.get("", response_model=SnapshotMetrics)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Overview dashboard metrics for the caller's team"""

    return await StatsService(db).get_snapshot(session.team_id)


@router.get("/analytics", response_model=AnalyticsSeries)
async def get_analytics(
    period: AnalyticsPeriod = AnalyticsPeriod.WEEK,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Seven-day completion and bug series for the caller's team"""

    return await StatsService(db).get_analytics(session.team_id, period=period)
