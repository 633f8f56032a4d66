"""Time utilities (store-local calendar days)."""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from app.config import settings

LOCAL_TZ = ZoneInfo(settings.APP_TZ)

DateLike = Union[datetime, date, str, None]


def to_local_day_start(value: DateLike, tz: tzinfo = LOCAL_TZ) -> Optional[datetime]:
    """
    Interpret a stored promotion date as a calendar day and return local midnight.

    Promotion bounds are saved as dates, not instants: datetimes are read as
    their UTC calendar date (document stores keep midnight UTC), strings use
    their leading YYYY-MM-DD part. Empty or unparseable values give None.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        day = value.date()
    elif isinstance(value, date):
        day = value
    else:
        try:
            day = date.fromisoformat(str(value).strip()[:10])
        except ValueError:
            return None

    return datetime.combine(day, time.min, tzinfo=tz)


def to_local_day_end(value: DateLike, tz: tzinfo = LOCAL_TZ) -> Optional[datetime]:
    """Last instant of the local day, so the whole end day is included."""
    start = to_local_day_start(value, tz=tz)
    if start is None:
        return None
    return start + timedelta(days=1) - timedelta(microseconds=1)


def local_day_of(now: Union[datetime, date], tz: tzinfo = LOCAL_TZ) -> datetime:
    """
    Start of the local day containing ``now``.

    Aware datetimes are converted to the local zone first; naive datetimes
    are taken as local wall-clock time.
    """
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            now = now.astimezone(tz)
        day = now.date()
    else:
        day = now
    return datetime.combine(day, time.min, tzinfo=tz)


def weekday_index(now: Union[datetime, date], tz: tzinfo = LOCAL_TZ) -> int:
    """Local weekday as 0=Sunday .. 6=Saturday."""
    return (local_day_of(now, tz=tz).weekday() + 1) % 7


def is_within_inclusive_local_range(
    start: Optional[datetime],
    end: Optional[datetime],
    now: datetime,
) -> bool:
    """Inclusive range test; a missing bound never matches."""
    if start is None or end is None:
        return False
    return start <= now <= end


def is_within_open_local_range(
    start: Optional[datetime],
    end: Optional[datetime],
    now: datetime,
) -> bool:
    """
    Inclusive range test where a missing bound leaves that side open.

    No bounds at all means always inside.
    """
    if start is not None and now < start:
        return False
    if end is not None and now > end:
        return False
    return True
