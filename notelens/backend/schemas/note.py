"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime

from pydantic import Field

from notelens.backend.schemas.base import CamelModel


class NoteCreate(CamelModel):
    """Schema for creating a new note."""

    title: str = Field(
        default="",
        max_length=255,
        description="Note title, may be empty",
        examples=["Meeting notes"],
    )
    content: str = Field(
        default="",
        description="Note body as an HTML string",
        examples=["<p>Discussed the <b>roadmap</b>.</p>"],
    )
    folder_id: str | None = Field(
        default=None,
        description="Folder to file the note under",
    )


class NoteUpdate(CamelModel):
    """Schema for updating an existing note. Only fields sent are changed."""

    title: str | None = Field(
        default=None,
        max_length=255,
        description="Note title",
    )
    content: str | None = Field(
        default=None,
        description="Note body as an HTML string",
    )
    folder_id: str | None = Field(
        default=None,
        description="Folder id, or null to remove the note from its folder",
    )


class NoteResponse(CamelModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    user_id: str = Field(description="Owning user")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body as an HTML string")
    folder_id: str | None = Field(description="Folder the note belongs to")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime | None = Field(description="Last update timestamp")
