"""
Folder Schemas.
"""

from datetime import datetime

from pydantic import Field

from notelens.backend.schemas.base import CamelModel


class FolderCreate(CamelModel):
    """Schema for creating a folder."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Folder name",
        examples=["Work"],
    )


class FolderUpdate(CamelModel):
    """Schema for renaming a folder."""

    name: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Folder name",
    )


class FolderResponse(CamelModel):
    """Schema for folder in API responses."""

    id: str = Field(description="Folder unique identifier")
    user_id: str = Field(description="Owning user")
    name: str = Field(description="Folder name")
    created_at: datetime = Field(description="Creation timestamp")
