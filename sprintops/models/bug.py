from sqlalchemy import Column, String, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel
from .enums import BugSeverity, BugStatus


class Bug(BaseModel):
    __tablename__ = "bugs"

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    severity = Column(String, nullable=False, default=BugSeverity.MEDIUM.value)  # LOW, MEDIUM, CRITICAL
    status = Column(String, nullable=False, default=BugStatus.OPEN.value)  # OPEN, FIXED

    # Foreign keys
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    linked_task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True, index=True)

    # Relationships
    team = relationship("Team", back_populates="bugs")
    linked_task = relationship("Task", back_populates="linked_bugs")
