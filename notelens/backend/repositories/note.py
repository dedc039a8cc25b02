"""
Note Repository.

Data access for notes. Listing is most-recent-activity first.
"""

from datetime import datetime, timedelta

from notelens.backend.core.utils import utc_now
from notelens.backend.models.note import Note
from notelens.backend.repositories.base import OwnedRepository


def _recency_key(note: Note) -> tuple[datetime, datetime, str]:
    return (note.last_activity, note.created_at, note.id)


def sort_most_recent_first(notes: list[Note]) -> list[Note]:
    """Order notes by update time (else creation time), newest first."""
    return sorted(notes, key=_recency_key, reverse=True)


def next_timestamp(previous: datetime | None) -> datetime:
    """
    Current time, nudged forward so it is strictly after `previous`.

    Consecutive clock reads can be equal on coarse clocks; an update must
    still move `updated_at` forward.
    """
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class NoteRepository(OwnedRepository[Note]):
    """
    Repository for Note records.

    Inherits owner-scoped lookups from OwnedRepository and adds
    note-specific queries.
    """

    model = Note

    def list_for_user(self, user_id: str) -> list[Note]:
        """Owner's notes, most recent activity first."""
        return sort_most_recent_first(self.list_owned(user_id))

    def list_in_folder(self, folder_id: str, user_id: str) -> list[Note]:
        """Owner's notes referencing `folder_id`, most recent activity first."""
        return sort_most_recent_first(
            self.scan(lambda n: n.user_id == user_id and n.folder_id == folder_id)
        )

    def remove_in_folder(self, folder_id: str, user_id: str) -> int:
        """Remove every note of `user_id` in `folder_id`. Returns the count removed."""
        doomed = [
            note.id for note in self._records.values()
            if note.user_id == user_id and note.folder_id == folder_id
        ]
        for note_id in doomed:
            del self._records[note_id]
        return len(doomed)
