"""
Response models shared between routers.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from ...models.enums import TaskStatus, TaskPriority, BugSeverity, BugStatus, UserRole
from ...utils.time import UTCDateTime



class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class UserResponse(UserSummary):
    role: UserRole
    team_id: int
    created_at: UTCDateTime


class TaskSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str


class BugSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    severity: BugSeverity
    status: BugStatus
    created_at: UTCDateTime


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    team_id: int
    assigned_to_id: Optional[int]
    assigned_to: Optional[UserSummary] = None
    due_date: Optional[UTCDateTime]
    block_reason: Optional[str]
    blocked_at: Optional[UTCDateTime]
    created_at: UTCDateTime
    updated_at: UTCDateTime


class TaskDetailResponse(TaskResponse):
    linked_bugs: List[BugSummary] = []


class BugResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str]
    severity: BugSeverity
    status: BugStatus
    team_id: int
    linked_task_id: Optional[int]
    linked_task: Optional[TaskSummary] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class MessageResponse(BaseModel):
    message: str
