from datetime import datetime, timezone

from sqlalchemy import DateTime

# Largest value an integer primary key column can hold
MAX_ID = 2**63 - 1

# Every datetime column stores naive UTC.
NAIVE_DATETIME = DateTime(timezone=False)


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every datetime column is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
