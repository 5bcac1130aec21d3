"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    All stored timestamps (paid_at, created_at, updated_at) come from here so
    they are comparable across writers.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)
