"""
Note Service.

Business logic layer for notes. Every call is made on behalf of a
Principal; notes owned by anyone else behave as if they did not exist.
"""

from notelens.backend.core.security import Principal
from notelens.backend.models.note import Note
from notelens.backend.schemas.note import NoteCreate, NoteUpdate
from notelens.backend.services.base import BaseService


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, updates, and retrieval scoped to the caller.
    """

    async def create_note(self, principal: Principal, data: NoteCreate) -> Note:
        """
        Create a new note owned by the caller.

        Args:
            principal: Caller identity
            data: Note creation data

        Returns:
            Created note
        """
        note = await self.store.create_note(
            user_id=principal.user_id,
            title=data.title,
            content=data.content,
            folder_id=data.folder_id,
        )

        self._log_operation("Note created", note_id=note.id, user_id=principal.user_id)
        return note

    async def get_note(self, principal: Principal, note_id: str) -> Note:
        """
        Get one of the caller's notes by ID.

        Raises:
            NotFoundError: If note not found or owned by another user
        """
        note = await self.store.get_note(note_id, principal.user_id)
        return self._require(note, "Note not found")

    async def list_notes(self, principal: Principal) -> list[Note]:
        """List the caller's notes, most recent activity first."""
        notes = await self.store.get_notes_by_user_id(principal.user_id)
        self._log_debug("Notes listed", user_id=principal.user_id, count=len(notes))
        return notes

    async def update_note(self, principal: Principal, note_id: str, data: NoteUpdate) -> Note:
        """
        Update an existing note.

        Args:
            principal: Caller identity
            note_id: Note ID to update
            data: Update data (only fields present in the request are changed)

        Returns:
            Updated note

        Raises:
            NotFoundError: If note not found or owned by another user
        """
        # folder_id may be cleared with an explicit null; title and content may not
        update_data = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key == "folder_id"
        }

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=list(update_data.keys()),
        )

        note = await self.store.update_note(note_id, update_data, principal.user_id)
        return self._require(note, "Note not found")

    async def delete_note(self, principal: Principal, note_id: str) -> None:
        """
        Delete a note.

        Raises:
            NotFoundError: If note not found or owned by another user
        """
        deleted = await self.store.delete_note(note_id, principal.user_id)
        if not deleted:
            self._require(None, "Note not found")

        self._log_operation("Note deleted", note_id=note_id)
