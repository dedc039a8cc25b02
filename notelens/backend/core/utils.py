"""
Core Utilities.

Clock and identifier helpers shared by the store, the middleware and the
response envelope.
"""

from datetime import datetime, timezone
from uuid import uuid4


def utc_now() -> datetime:
    """
    Current UTC time, tz-naive.

    Stored timestamps are naive UTC throughout; comparisons between them
    never mix aware and naive values.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    """Fresh record id: a UUID4 string."""
    return str(uuid4())
