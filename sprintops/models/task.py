from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel
from .enums import TaskStatus, TaskPriority


class Task(BaseModel):
    __tablename__ = "tasks"

    # Core fields
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default=TaskStatus.TODO.value)  # TODO, IN_PROGRESS, BLOCKED, DONE
    priority = Column(String, nullable=False, default=TaskPriority.MEDIUM.value)  # LOW, MEDIUM, HIGH
    due_date = Column(DateTime(timezone=True), nullable=True)

    # Blocker bookkeeping, only populated while status is BLOCKED
    block_reason = Column(Text, nullable=True)
    blocked_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_to_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    team = relationship("Team", back_populates="tasks")
    assigned_to = relationship("User", back_populates="assigned_tasks")
    linked_bugs = relationship("Bug", back_populates="linked_task", passive_deletes=True)
