"""
User Schemas.

The stored password hash is never part of a response.
"""

from pydantic import Field

from notelens.backend.schemas.base import CamelModel


class UserCreate(CamelModel):
    """Schema for registering a user."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name",
        examples=["ada"],
    )
    password: str | None = Field(
        default=None,
        min_length=1,
        max_length=72,
        description="Optional password, stored only as a bcrypt hash",
    )


class UserResponse(CamelModel):
    """Schema for user in API responses."""

    id: str = Field(description="User unique identifier; send it as x-user-id")
    username: str = Field(description="Display name")
