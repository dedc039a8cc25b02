"""
Note Record.
"""

from dataclasses import dataclass
from datetime import datetime

NOTE_MUTABLE_FIELDS = frozenset({"title", "content", "folder_id"})


@dataclass
class Note:
    """
    A rich-text note owned by a single user.

    `content` is an HTML string. `folder_id` is a loose reference: nothing
    prevents it from naming a folder that does not exist, but deleting a
    folder removes the owner's notes that reference it.
    """

    id: str
    user_id: str
    title: str
    content: str
    folder_id: str | None
    created_at: datetime
    updated_at: datetime | None = None

    @property
    def last_activity(self) -> datetime:
        """Update time if present, else creation time."""
        return self.updated_at or self.created_at

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
