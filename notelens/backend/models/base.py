"""
Record Base.

Records are plain dataclasses with no behaviour beyond simple derived values.
The entity store hands out copies so callers never hold a reference into
its backing maps.
"""

import dataclasses
from typing import Any, TypeVar

RecordT = TypeVar("RecordT")


def copy_record(record: RecordT) -> RecordT:
    """Return a shallow copy of a record dataclass."""
    return dataclasses.replace(record)


def merge_record(record: RecordT, changes: dict[str, Any], allowed: frozenset[str]) -> RecordT:
    """
    Return a copy of `record` with `changes` applied.

    Keys outside `allowed` are ignored, so identity and ownership fields
    cannot be overwritten through a partial update.
    """
    applicable = {key: value for key, value in changes.items() if key in allowed}
    return dataclasses.replace(record, **applicable)
