from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite hands them back without an offset)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise an incoming datetime to UTC before it is stored."""
    value = ensure_aware(value)
    if value is None:
        return None
    return value.astimezone(timezone.utc)


# Response field type that always serializes with an offset
UTCDateTime = Annotated[datetime, AfterValidator(ensure_aware)]
