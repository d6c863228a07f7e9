from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import declarative_base

from ..utils.time import utcnow

Base = declarative_base()

# Largest value a 32-bit INTEGER primary key can hold
MAX_ID = 2 ** 31 - 1


def is_storable_id(value: int) -> bool:
    """Whether ``value`` can be bound as a primary key without overflowing the driver."""
    return 0 < value <= MAX_ID


class BaseModel(Base):
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
