"""Clock collaborator.

All expiry comparisons go through ``utcnow`` so they share one time source.
Timestamps are stored as naive UTC.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)
