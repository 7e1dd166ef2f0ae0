"""
Date and time utilities for the Mente Tech blog.

All timestamps handled by the application are timezone-aware UTC values.
These helpers normalize naive values coming from clients or from database
drivers that drop timezone information.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        datetime: Current time in UTC with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Return ``dt`` as an aware UTC datetime.

    Naive values are assumed to already be in UTC.

    Args:
        dt: Datetime to normalize, or None

    Returns:
        Aware datetime in UTC, or None if ``dt`` is None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_datetime(date_string: str, assume_utc: bool = True) -> datetime:
    """
    Parse ISO 8601 datetime string into datetime object.

    Args:
        date_string: ISO 8601 datetime string
        assume_utc: Whether to assume UTC timezone if timezone not specified

    Returns:
        Parsed datetime object, converted to UTC when it carries an offset

    Raises:
        ValueError: If the string cannot be parsed as ISO format
    """
    if not isinstance(date_string, str) or not date_string.strip():
        raise ValueError("Datetime value must be a non-empty ISO 8601 string")

    # Handle 'Z' timezone indicator by converting to +00:00
    dt = datetime.fromisoformat(date_string.strip().replace('Z', '+00:00'))

    if dt.tzinfo is None:
        if assume_utc:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt

    return dt.astimezone(timezone.utc)


def format_timestamp(dt: Optional[datetime] = None) -> str:
    """
    Format a datetime as an ISO 8601 UTC string.

    Args:
        dt: Datetime to format (defaults to now)

    Returns:
        ISO formatted string
    """
    if dt is None:
        return utcnow().isoformat()
    return ensure_utc(dt).isoformat()


def to_iso_format(dt: Optional[datetime]) -> Optional[str]:
    """Serialize an optional datetime for JSON responses."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat()
