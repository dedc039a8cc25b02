"""
Folder Repository.
"""

from notelens.backend.models.folder import Folder
from notelens.backend.repositories.base import OwnedRepository


class FolderRepository(OwnedRepository[Folder]):
    """Repository for Folder records."""

    model = Folder

    def list_for_user(self, user_id: str) -> list[Folder]:
        """Owner's folders ordered by name (case-insensitive first)."""
        return sorted(
            self.list_owned(user_id),
            key=lambda f: (f.name.casefold(), f.name),
        )
