# app/utils/dates.py

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    DB에서 읽은 datetime을 UTC aware 값으로 맞춥니다.
    (SQLite 등 timezone을 저장하지 않는 드라이버는 naive 값을 반환합니다.)
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
