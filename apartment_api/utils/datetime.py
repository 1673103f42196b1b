"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Current time as a timezone-aware UTC datetime.

    Listing writers stamp created_at and updated_at with this value.
    """
    return datetime.now(timezone.utc)
