"""
User Repository.
"""

from notelens.backend.models.user import User
from notelens.backend.repositories.base import InMemoryRepository


class UserRepository(InMemoryRepository[User]):
    """Repository for User records. Usernames are not required to be unique."""

    model = User

    def get_by_username(self, username: str) -> User | None:
        """First user registered with `username`, or None."""
        matches = self.scan(lambda u: u.username == username)
        return matches[0] if matches else None
