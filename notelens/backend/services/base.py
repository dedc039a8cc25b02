"""
Base Service.

Services act on the entity store for a Principal. The store reports a
missing or foreign record as None / False; services turn that into
NotFoundError so routes never see the difference between the two.

    class FolderService(BaseService):
        async def get_folder(self, principal: Principal, folder_id: str) -> Folder:
            folder = await self.store.get_folder(folder_id, principal.user_id)
            return self._require(folder, "Folder not found")
"""

from typing import Any, TypeVar

from notelens.backend.core.exceptions import NotFoundError
from notelens.backend.core.logging import get_logger
from notelens.backend.repositories.store import EntityStore

T = TypeVar("T")


class BaseService:
    """Store access, absence translation and mutation logging shared by all services."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store
        self._logger = get_logger(self.__class__.__module__)

    @property
    def store(self) -> EntityStore:
        return self._store

    def _require(self, value: T | None, message: str) -> T:
        """
        Return `value` unless the store reported absence.

        Raises:
            NotFoundError: If value is None
        """
        if value is None:
            raise NotFoundError(message)
        return value

    def _log_context(self, context: dict[str, Any]) -> dict[str, Any]:
        return {"service": self.__class__.__name__, **context}

    def _log_operation(self, operation: str, **context: Any) -> None:
        """Info-level record of a mutation, tagged with the service name."""
        self._logger.info(operation, extra=self._log_context(context))

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra=self._log_context(context))
