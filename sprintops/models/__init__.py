"""
SQLAlchemy models for SprintOps.

Importing this package registers every table on ``Base.metadata`` so
relationships resolve and ``create_all`` sees the full schema.
"""

from .base import Base, BaseModel, MAX_ID, is_storable_id
from .enums import UserRole, TaskStatus, TaskPriority, BugSeverity, BugStatus
from .user import Team, User
from .task import Task
from .bug import Bug
