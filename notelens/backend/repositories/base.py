"""
Base Repository.

Base classes for the in-memory repositories backing the entity store.
Records live in a plain dict keyed by id; queries are linear scans.
Every read returns copies so no caller can mutate the backing map.
"""

from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

from notelens.backend.core.logging import get_logger
from notelens.backend.models.base import copy_record

logger = get_logger(__name__)


class _Identified(Protocol):
    id: str


class _Owned(Protocol):
    id: str
    user_id: str


ModelType = TypeVar("ModelType", bound=_Identified)
OwnedType = TypeVar("OwnedType", bound=_Owned)


class InMemoryRepository(Generic[ModelType]):
    """
    Base repository with common dict-backed operations.

    Subclasses set the model class:

        class UserRepository(InMemoryRepository[User]):
            model = User
    """

    model: type[ModelType]

    def __init__(self) -> None:
        self._records: dict[str, ModelType] = {}

    def get_by_id_or_none(self, id: str) -> ModelType | None:
        """Get a copy of a single record by ID, or None."""
        instance = self._records.get(id)
        return copy_record(instance) if instance is not None else None

    def add(self, instance: ModelType) -> ModelType:
        """Store a new record and return a copy of it."""
        self._records[instance.id] = instance
        return copy_record(instance)

    def save(self, instance: ModelType) -> ModelType:
        """Replace the stored state of an existing record."""
        self._records[instance.id] = instance
        return copy_record(instance)

    def remove(self, id: str) -> bool:
        """Remove a record by ID. Returns False if it was not present."""
        return self._records.pop(id, None) is not None

    def scan(self, predicate: Callable[[ModelType], bool]) -> list[ModelType]:
        """Return copies of every record matching `predicate`."""
        return [copy_record(r) for r in self._records.values() if predicate(r)]

    def exists(self, id: str) -> bool:
        """Check if a record exists by ID."""
        return id in self._records

    def count(self) -> int:
        """Number of stored records."""
        return len(self._records)

    def clear(self) -> None:
        """Drop every record."""
        self._records.clear()


class OwnedRepository(InMemoryRepository[OwnedType]):
    """
    Repository for records carrying a `user_id` owner field.

    Owner-scoped lookups never distinguish "does not exist" from
    "exists but belongs to someone else".
    """

    def get_owned(self, id: str, user_id: str) -> OwnedType | None:
        """Get a record only if it exists and is owned by `user_id`."""
        instance = self._records.get(id)
        if instance is None or instance.user_id != user_id:
            return None
        return copy_record(instance)

    def list_owned(self, user_id: str) -> list[OwnedType]:
        """All records owned by `user_id`, in insertion order."""
        return self.scan(lambda r: r.user_id == user_id)
