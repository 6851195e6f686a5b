"""
Date helpers. A user's "today" is always the calendar date in their profile timezone.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from axis6.config.settings import settings

logger = logging.getLogger(__name__)


def is_valid_timezone(name: Optional[str]) -> bool:
    if not name:
        return False
    try:
        ZoneInfo(name)
        return True
    except (ZoneInfoNotFoundError, ValueError):
        return False


def resolve_timezone(name: Optional[str]) -> ZoneInfo:
    """ZoneInfo for name, falling back to the configured default for unknown zones."""
    if is_valid_timezone(name):
        return ZoneInfo(name)
    if name:
        logger.warning(f"Unknown timezone '{name}', using {settings.default_timezone}")
    return ZoneInfo(settings.default_timezone)


def local_today(timezone_name: Optional[str] = None, now: Optional[datetime] = None) -> date:
    tz = resolve_timezone(timezone_name)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(tz).date()


def local_now(timezone_name: Optional[str] = None) -> datetime:
    """Current wall-clock time in the given zone (default zone for unknown names)."""
    return datetime.now(resolve_timezone(timezone_name))


def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """Accepts date objects, 'YYYY-MM-DD' strings and ISO timestamps (date part is kept)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    if len(text) >= 10:
        return date.fromisoformat(text[:10])
    return date.fromisoformat(text)


def parse_time(value: Union[str, time]) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value))


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).replace("Z", "+00:00")
    return datetime.fromisoformat(text)


def minutes_between(start: time, end: time) -> int:
    """Whole minutes from start to end on the same day."""
    start_dt = datetime.combine(date.min, start)
    end_dt = datetime.combine(date.min, end)
    return int((end_dt - start_dt).total_seconds() // 60)


def date_range(start: date, end: date):
    """Inclusive range of dates from start to end."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
