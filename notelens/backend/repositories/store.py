"""
Entity Store.

Owner-scoped access to users, notes and folders.

`EntityStore` is the interface the services depend on; `MemoryEntityStore`
keeps everything in process memory and is lost on restart. All operations
are coroutines so a persistent backend can replace the in-memory one without
touching callers. None of the in-memory operations await, so no mutation is
ever interleaved with another on the event loop.

"Not found" (missing, or owned by somebody else) is reported as None / False.
Translating that into an HTTP error is the service layer's job.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

from notelens.backend.core.logging import get_logger
from notelens.backend.core.utils import new_id, utc_now
from notelens.backend.models.base import merge_record
from notelens.backend.models.folder import FOLDER_MUTABLE_FIELDS, Folder
from notelens.backend.models.note import NOTE_MUTABLE_FIELDS, Note
from notelens.backend.models.user import User
from notelens.backend.repositories.folder import FolderRepository
from notelens.backend.repositories.note import NoteRepository, next_timestamp
from notelens.backend.repositories.user import UserRepository

logger = get_logger(__name__)


class EntityStore(ABC):
    """Owner-scoped storage for users, notes and folders."""

    @abstractmethod
    async def get_user(self, id: str) -> User | None: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    async def create_user(self, *, username: str, password: str | None = None) -> User: ...

    @abstractmethod
    async def get_notes_by_user_id(self, user_id: str) -> list[Note]: ...

    @abstractmethod
    async def get_note(self, id: str, user_id: str) -> Note | None: ...

    @abstractmethod
    async def create_note(
        self,
        *,
        user_id: str,
        title: str = "",
        content: str = "",
        folder_id: str | None = None,
    ) -> Note: ...

    @abstractmethod
    async def update_note(self, id: str, changes: dict[str, Any], user_id: str) -> Note | None: ...

    @abstractmethod
    async def delete_note(self, id: str, user_id: str) -> bool: ...

    @abstractmethod
    async def get_folders_by_user_id(self, user_id: str) -> list[Folder]: ...

    @abstractmethod
    async def get_folder(self, id: str, user_id: str) -> Folder | None: ...

    @abstractmethod
    async def create_folder(self, *, user_id: str, name: str) -> Folder: ...

    @abstractmethod
    async def update_folder(self, id: str, changes: dict[str, Any], user_id: str) -> Folder | None: ...

    @abstractmethod
    async def delete_folder(self, id: str, user_id: str) -> bool: ...

    @abstractmethod
    async def get_folder_notes(self, folder_id: str, user_id: str) -> list[Note]: ...


class MemoryEntityStore(EntityStore):
    """
    In-memory EntityStore.

    Each record kind lives in its own repository. Records returned to
    callers are copies; changing them has no effect on stored state.
    """

    backend_name = "memory"

    def __init__(self) -> None:
        self.users = UserRepository()
        self.notes = NoteRepository()
        self.folders = FolderRepository()

    # Users

    async def get_user(self, id: str) -> User | None:
        return self.users.get_by_id_or_none(id)

    async def get_user_by_username(self, username: str) -> User | None:
        return self.users.get_by_username(username)

    async def create_user(self, *, username: str, password: str | None = None) -> User:
        return self.users.add(User(id=new_id(), username=username, password=password))

    # Notes

    async def get_notes_by_user_id(self, user_id: str) -> list[Note]:
        return self.notes.list_for_user(user_id)

    async def get_note(self, id: str, user_id: str) -> Note | None:
        return self.notes.get_owned(id, user_id)

    async def create_note(
        self,
        *,
        user_id: str,
        title: str = "",
        content: str = "",
        folder_id: str | None = None,
    ) -> Note:
        now = utc_now()
        note = Note(
            id=new_id(),
            user_id=user_id,
            title=title,
            content=content,
            folder_id=folder_id or None,
            created_at=now,
            updated_at=now,
        )
        return self.notes.add(note)

    async def update_note(self, id: str, changes: dict[str, Any], user_id: str) -> Note | None:
        current = self.notes.get_owned(id, user_id)
        if current is None:
            return None

        updated = merge_record(current, changes, NOTE_MUTABLE_FIELDS)
        updated.folder_id = updated.folder_id or None
        updated.updated_at = next_timestamp(current.last_activity)
        return self.notes.save(updated)

    async def delete_note(self, id: str, user_id: str) -> bool:
        if self.notes.get_owned(id, user_id) is None:
            return False
        return self.notes.remove(id)

    # Folders

    async def get_folders_by_user_id(self, user_id: str) -> list[Folder]:
        return self.folders.list_for_user(user_id)

    async def get_folder(self, id: str, user_id: str) -> Folder | None:
        return self.folders.get_owned(id, user_id)

    async def create_folder(self, *, user_id: str, name: str) -> Folder:
        folder = Folder(id=new_id(), user_id=user_id, name=name, created_at=utc_now())
        return self.folders.add(folder)

    async def update_folder(self, id: str, changes: dict[str, Any], user_id: str) -> Folder | None:
        current = self.folders.get_owned(id, user_id)
        if current is None:
            return None
        return self.folders.save(merge_record(current, changes, FOLDER_MUTABLE_FIELDS))

    async def delete_folder(self, id: str, user_id: str) -> bool:
        if self.folders.get_owned(id, user_id) is None:
            return False

        removed_notes = self.notes.remove_in_folder(id, user_id)
        self.folders.remove(id)
        logger.debug(
            "Folder removed with its notes",
            extra={"folder_id": id, "removed_notes": removed_notes},
        )
        return True

    async def get_folder_notes(self, folder_id: str, user_id: str) -> list[Note]:
        return self.notes.list_in_folder(folder_id, user_id)

    def counts(self) -> dict[str, int]:
        """Record totals per kind, for readiness reporting."""
        return {
            "users": self.users.count(),
            "notes": self.notes.count(),
            "folders": self.folders.count(),
        }


@lru_cache
def get_store() -> MemoryEntityStore:
    """Process-wide store instance."""
    return MemoryEntityStore()
