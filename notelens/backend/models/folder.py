"""
Folder Record.
"""

from dataclasses import dataclass
from datetime import datetime

FOLDER_MUTABLE_FIELDS = frozenset({"name"})


@dataclass
class Folder:
    """A named grouping of notes owned by a single user."""

    id: str
    user_id: str
    name: str
    created_at: datetime

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name!r})>"
