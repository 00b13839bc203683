from datetime import datetime
import pytz

from ponto.config import settings


def get_company_timezone(timezone_str: str = None) -> pytz.BaseTzInfo:
    """Company timezone, falling back to UTC on an unknown name"""
    try:
        return pytz.timezone(timezone_str or settings.TIMEZONE)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def utc_now() -> datetime:
    """Current time in UTC"""
    return datetime.now(pytz.UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC"""
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def to_company_timezone(dt: datetime, timezone_str: str = None) -> datetime:
    """Convert a UTC datetime to the company timezone"""
    return ensure_utc(dt).astimezone(get_company_timezone(timezone_str))

