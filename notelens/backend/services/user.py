"""
User Service.

Registration and lookup. Usernames are not unique; passwords, when given,
are stored only as bcrypt hashes.
"""

from notelens.backend.core.security import Principal, hash_password
from notelens.backend.models.user import User
from notelens.backend.schemas.user import UserCreate
from notelens.backend.services.base import BaseService


class UserService(BaseService):
    """Service for user registration and lookup."""

    async def register(self, data: UserCreate) -> User:
        """
        Register a new user.

        Args:
            data: Registration data

        Returns:
            Created user. Its id is the value clients send as x-user-id.
        """
        hashed = hash_password(data.password) if data.password else None
        user = await self.store.create_user(username=data.username, password=hashed)

        self._log_operation("User registered", user_id=user.id)
        return user

    async def get_current_user(self, principal: Principal) -> User:
        """
        Get the registered user matching the caller's identity.

        Raises:
            NotFoundError: If no user was registered with that id
        """
        user = await self.store.get_user(principal.user_id)
        return self._require(user, "User not found")
