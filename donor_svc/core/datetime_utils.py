"""
UTC-first datetime utilities for Donor Service API.

- Internal processing: timezone-aware datetimes in UTC
- Database storage: ISO 8601 strings in UTC (SQLite stores as TEXT)
- API responses: ISO 8601 strings with 'Z' suffix

Usage:
    from core.datetime_utils import utc_now, format_iso

    created_at = format_iso(utc_now())  # "2025-01-15T05:00:00Z"
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Union

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Get current datetime in UTC with timezone info."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Naive datetimes are assumed to already be UTC; aware ones are converted.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO 8601 string (or datetime) to a UTC datetime.

    Raises:
        ValueError: If the value cannot be parsed.

    Examples:
        >>> parse_datetime("2024-01-15T10:30:00Z")
        datetime.datetime(2024, 1, 15, 10, 30, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, datetime):
        return to_utc(value)

    if not isinstance(value, str):
        raise ValueError(f"Expected datetime or string, got {type(value).__name__}")

    value = value.strip()
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        return to_utc(datetime.fromisoformat(value))
    except ValueError:
        pass

    # SQLite CURRENT_TIMESTAMP format
    try:
        return datetime.strptime(value, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)
    except ValueError:
        raise ValueError(f"Cannot parse datetime: '{value}'")


def parse_datetime_safe(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse a datetime, returning None (and logging) instead of raising."""
    if value is None:
        return None
    try:
        return parse_datetime(value)
    except ValueError as e:
        logger.warning(f"Failed to parse datetime '{value}': {e}")
        return None


def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string with 'Z' suffix.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00Z'
    """
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_for_display(value: Union[str, datetime, None], include_time: bool = False) -> str:
    """
    Format a stored timestamp for the HTML views.

    Example:
        >>> format_for_display("2024-01-15T10:30:00Z")
        '15 Jan 2024'
    """
    dt = parse_datetime_safe(value)
    if dt is None:
        return "-"
    if include_time:
        return dt.strftime("%d %b %Y, %H:%M UTC")
    return dt.strftime("%d %b %Y")
