"""
Task state rules.

Pure functions that derive a task's persisted state from a create request or
from its current state plus a partial update. Nothing here touches the
database, so the blocked-state bookkeeping can be exercised on its own.

Partial updates are passed as a plain mapping holding only the fields the
caller sent: a missing key leaves the stored value alone, a key mapped to
``None`` clears it.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any, Mapping, Optional

from ..models.enums import TaskStatus, TaskPriority

# Fields copied straight from the update when present
PLAIN_FIELDS = ("title", "description", "priority", "assigned_to_id", "due_date")


@dataclass(frozen=True)
class TaskState:
    title: str
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    description: Optional[str] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None
    block_reason: Optional[str] = None
    blocked_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, task: Any) -> "TaskState":
        return cls(
            title=task.title,
            status=TaskStatus(task.status),
            priority=TaskPriority(task.priority),
            description=task.description,
            assigned_to_id=task.assigned_to_id,
            due_date=task.due_date,
            block_reason=task.block_reason,
            blocked_at=task.blocked_at,
        )

    def apply_to(self, task: Any) -> None:
        """Copy this state onto an ORM row."""
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, (TaskStatus, TaskPriority)):
                value = value.value
            setattr(task, field.name, value)


def initial_task_state(values: Mapping[str, Any], now: datetime) -> TaskState:
    """Build the state of a newly created task."""

    status = TaskStatus(values.get("status") or TaskStatus.TODO)
    blocked = status == TaskStatus.BLOCKED

    return TaskState(
        title=values["title"],
        status=status,
        priority=TaskPriority(values.get("priority") or TaskPriority.MEDIUM),
        description=values.get("description"),
        assigned_to_id=values.get("assigned_to_id"),
        due_date=values.get("due_date"),
        block_reason=(values.get("block_reason") or None) if blocked else None,
        blocked_at=now if blocked else None,
    )


def apply_task_update(current: TaskState, changes: Mapping[str, Any], now: datetime) -> TaskState:
    """Return the state that results from applying ``changes`` to ``current``."""

    updates = {name: changes[name] for name in PLAIN_FIELDS if name in changes}
    if "priority" in updates:
        updates["priority"] = TaskPriority(updates["priority"])

    new_status = TaskStatus(changes["status"]) if changes.get("status") is not None else None

    if new_status == TaskStatus.BLOCKED and current.status != TaskStatus.BLOCKED:
        updates["blocked_at"] = now
        updates["block_reason"] = changes.get("block_reason") or None
    elif new_status is not None and new_status != TaskStatus.BLOCKED:
        # Leaving (or never entering) BLOCKED wipes the blocker, whatever was sent
        updates["blocked_at"] = None
        updates["block_reason"] = None
    elif "block_reason" in changes:
        updates["block_reason"] = changes["block_reason"]

    if new_status is not None:
        updates["status"] = new_status

    return replace(current, **updates)
