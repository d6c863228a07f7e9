from sqlalchemy import Column, String, ForeignKey, Integer
from sqlalchemy.orm import relationship
from .base import BaseModel
from .enums import UserRole


class Team(BaseModel):
    __tablename__ = "teams"

    name = Column(String, nullable=False)

    # Relationships
    members = relationship(
        "User", back_populates="team", cascade="all, delete-orphan", passive_deletes=True
    )
    tasks = relationship(
        "Task", back_populates="team", cascade="all, delete-orphan", passive_deletes=True
    )
    bugs = relationship(
        "Bug", back_populates="team", cascade="all, delete-orphan", passive_deletes=True
    )


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default=UserRole.MEMBER.value)  # ADMIN, MEMBER

    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    team = relationship("Team", back_populates="members")
    assigned_tasks = relationship("Task", back_populates="assigned_to", passive_deletes=True)
