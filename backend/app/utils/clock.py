"""
Time helpers. Timestamps are stored as naive UTC.
"""

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Current UTC time without tzinfo, matching the stored column format."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utctoday() -> date:
    """Current UTC date."""
    return utcnow().date()
