from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum

from pydantic import BaseModel, Field

from ..models.enums import TaskStatus, BugStatus
from ..utils.time import UTCDateTime, ensure_aware

RECENT_BLOCKERS_LIMIT = 3
DUE_THIS_WEEK_LIMIT = 5
ANALYTICS_BUCKETS = 7
SATURDAY = 5


class AnalyticsPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"


# How far back rows are considered before bucketing
PERIOD_LOOKBACK_DAYS = {
    AnalyticsPeriod.WEEK: 7,
    AnalyticsPeriod.MONTH: 30,
}


class BlockerAssignee(BaseModel):
    name: str


class RecentBlocker(BaseModel):
    id: int
    title: str
    block_reason: Optional[str]
    blocked_at: Optional[UTCDateTime]
    assigned_to: Optional[BlockerAssignee] = None


class DueTask(BaseModel):
    id: int
    title: str
    priority: str
    due_date: UTCDateTime


class SnapshotMetrics(BaseModel):
    active_tasks: int
    blocked_tasks: int
    open_bugs: int
    sprint_completion: int
    total_tasks: int
    done_tasks: int
    recent_blockers: List[RecentBlocker] = Field(default_factory=list)
    tasks_due_this_week: List[DueTask] = Field(default_factory=list)


class AnalyticsSeries(BaseModel):
    period: AnalyticsPeriod
    days: List[str]
    tasks_completed_per_day: List[int]
    bugs_opened_per_day: List[int]
    bugs_fixed_per_day: List[int]
    sprint_progress: List[int]


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up, 0 for an empty whole."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def local_date(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar date of ``moment`` in ``tz``, or in the server's zone when ``tz`` is None."""
    return moment.astimezone(tz).date()


def localize(naive: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Attach ``tz`` to a wall-clock time.

    With ``tz`` None the server's zone rules are looked up for that very date,
    so boundaries on either side of a DST change get their own offset.
    """
    if tz is None:
        return naive.astimezone()
    return naive.replace(tzinfo=tz)


def day_bounds(day: date, tz: Optional[tzinfo] = None) -> Tuple[datetime, datetime]:
    return localize(datetime.combine(day, time.min), tz), localize(datetime.combine(day, time.max), tz)


def end_of_week(now: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Last instant of the Sunday-to-Saturday week containing ``now``."""
    today = local_date(now, tz)
    days_left = (SATURDAY - today.weekday()) % 7
    return day_bounds(today + timedelta(days=days_left), tz)[1]


def _local(value: Optional[datetime], now: datetime) -> Optional[datetime]:
    value = ensure_aware(value)
    if value is None:
        return None
    return value.astimezone(now.tzinfo)


def compute_snapshot(
    tasks: Sequence[Any],
    bugs: Sequence[Any],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> SnapshotMetrics:
    """Overview dashboard counters for one team.

    ``now`` must be timezone-aware. The week ends on Saturday in ``tz``, or in
    the server's zone when ``tz`` is None.
    """

    statuses = [TaskStatus(task.status) for task in tasks]
    done = statuses.count(TaskStatus.DONE)
    total = len(statuses)

    blocked = [task for task in tasks if task.status == TaskStatus.BLOCKED.value]
    blocked.sort(
        key=lambda task: _local(task.blocked_at, now) or datetime.min.replace(tzinfo=now.tzinfo),
        reverse=True,
    )

    recent_blockers = [
        RecentBlocker(
            id=task.id,
            title=task.title,
            block_reason=task.block_reason,
            blocked_at=task.blocked_at,
            assigned_to=BlockerAssignee(name=task.assigned_to.name) if task.assigned_to else None,
        )
        for task in blocked[:RECENT_BLOCKERS_LIMIT]
    ]

    week_end = end_of_week(now, tz)
    due = [
        task for task in tasks
        if task.status != TaskStatus.DONE.value
        and task.due_date is not None
        and _local(task.due_date, now) <= week_end
    ]
    due.sort(key=lambda task: _local(task.due_date, now))

    tasks_due_this_week = [
        DueTask(id=task.id, title=task.title, priority=task.priority, due_date=task.due_date)
        for task in due[:DUE_THIS_WEEK_LIMIT]
    ]

    return SnapshotMetrics(
        active_tasks=statuses.count(TaskStatus.TODO) + statuses.count(TaskStatus.IN_PROGRESS),
        blocked_tasks=statuses.count(TaskStatus.BLOCKED),
        open_bugs=sum(1 for bug in bugs if bug.status == BugStatus.OPEN.value),
        sprint_completion=percentage(done, total),
        total_tasks=total,
        done_tasks=done,
        recent_blockers=recent_blockers,
        tasks_due_this_week=tasks_due_this_week,
    )


def compute_analytics(
    tasks: Sequence[Any],
    bugs: Sequence[Any],
    period: AnalyticsPeriod,
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> AnalyticsSeries:
    """Seven daily buckets ending today, oldest first.

    ``period`` only widens the window rows are drawn from; the output always
    has seven one-day buckets. Days are calendar days in ``tz``, or in the
    server's zone when ``tz`` is None.
    """

    window_start = now - timedelta(days=PERIOD_LOOKBACK_DAYS[period])

    completed = [
        _local(task.updated_at, now)
        for task in tasks
        if task.status == TaskStatus.DONE.value and _local(task.updated_at, now) >= window_start
    ]

    candidate_bugs = [
        bug for bug in bugs
        if _local(bug.created_at, now) >= window_start
        or (bug.status == BugStatus.FIXED.value and _local(bug.updated_at, now) >= window_start)
    ]
    opened = [_local(bug.created_at, now) for bug in candidate_bugs]
    fixed = [
        _local(bug.updated_at, now)
        for bug in candidate_bugs
        if bug.status == BugStatus.FIXED.value
    ]

    # Cumulative progress looks at every task the team has ever had
    done_ever = [
        _local(task.updated_at, now)
        for task in tasks
        if task.status == TaskStatus.DONE.value
    ]
    total_tasks = len(tasks)

    series = AnalyticsSeries(
        period=period,
        days=[],
        tasks_completed_per_day=[],
        bugs_opened_per_day=[],
        bugs_fixed_per_day=[],
        sprint_progress=[],
    )

    today = local_date(now, tz)
    for offset in range(ANALYTICS_BUCKETS - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_start, day_end = day_bounds(day, tz)

        def in_day(moment: datetime) -> bool:
            return day_start <= moment <= day_end

        series.days.append(day.strftime("%a"))
        series.tasks_completed_per_day.append(sum(1 for moment in completed if in_day(moment)))
        series.bugs_opened_per_day.append(sum(1 for moment in opened if in_day(moment)))
        series.bugs_fixed_per_day.append(sum(1 for moment in fixed if in_day(moment)))
        series.sprint_progress.append(
            percentage(sum(1 for moment in done_ever if moment <= day_end), total_tasks)
        )

    return series
