"""
Folder Service.

Folder management for the caller. Deleting a folder also deletes the
caller's notes filed under it.
"""

from notelens.backend.core.security import Principal
from notelens.backend.models.folder import Folder
from notelens.backend.models.note import Note
from notelens.backend.schemas.folder import FolderCreate, FolderUpdate
from notelens.backend.services.base import BaseService


class FolderService(BaseService):
    """Service for folder business logic."""

    async def create_folder(self, principal: Principal, data: FolderCreate) -> Folder:
        """Create a folder owned by the caller."""
        folder = await self.store.create_folder(user_id=principal.user_id, name=data.name)
        self._log_operation("Folder created", folder_id=folder.id, user_id=principal.user_id)
        return folder

    async def get_folder(self, principal: Principal, folder_id: str) -> Folder:
        """
        Get one of the caller's folders.

        Raises:
            NotFoundError: If folder not found or owned by another user
        """
        folder = await self.store.get_folder(folder_id, principal.user_id)
        return self._require(folder, "Folder not found")

    async def list_folders(self, principal: Principal) -> list[Folder]:
        """List the caller's folders ordered by name."""
        folders = await self.store.get_folders_by_user_id(principal.user_id)
        self._log_debug("Folders listed", user_id=principal.user_id, count=len(folders))
        return folders

    async def list_folder_notes(self, principal: Principal, folder_id: str) -> list[Note]:
        """
        List the caller's notes in a folder, most recent activity first.

        Raises:
            NotFoundError: If folder not found or owned by another user
        """
        await self.get_folder(principal, folder_id)
        notes = await self.store.get_folder_notes(folder_id, principal.user_id)
        self._log_debug("Folder notes listed", folder_id=folder_id, count=len(notes))
        return notes

    async def update_folder(
        self,
        principal: Principal,
        folder_id: str,
        data: FolderUpdate,
    ) -> Folder:
        """
        Rename a folder.

        Raises:
            NotFoundError: If folder not found or owned by another user
        """
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        self._log_operation("Updating folder", folder_id=folder_id, fields=list(update_data))

        folder = await self.store.update_folder(folder_id, update_data, principal.user_id)
        return self._require(folder, "Folder not found")

    async def delete_folder(self, principal: Principal, folder_id: str) -> None:
        """
        Delete a folder together with the caller's notes inside it.

        Raises:
            NotFoundError: If folder not found or owned by another user
        """
        deleted = await self.store.delete_folder(folder_id, principal.user_id)
        if not deleted:
            self._require(None, "Folder not found")

        self._log_operation("Folder deleted", folder_id=folder_id)
