"""
Analysis Schemas.

The fixed result shape returned by every AI route, and the JSON bodies of
the non-upload AI routes.
"""

from typing import Literal

from pydantic import Field

from notelens.backend.schemas.base import CamelModel

AnalysisKind = Literal["image", "pdf", "audio", "youtube", "note-summary"]
ResultType = Literal["image", "pdf", "audio", "youtube", "note-summary", "error"]


class AIAnalysisResult(CamelModel):
    """Structured summary of one piece of content."""

    summary: str = Field(description="Prose summary")
    key_points: list[str] = Field(
        default_factory=list,
        description="Bullet-style highlights",
    )
    confidence: float = Field(
        ge=0.0,
        le=1.0,
        description="Provider confidence in [0, 1]",
    )
    type: ResultType = Field(description="Requested content kind, or 'error'")


class YouTubeAnalysisRequest(CamelModel):
    """Body of the YouTube analysis route."""

    url: str | None = Field(
        default=None,
        description="YouTube watch, short or embed URL",
        examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ"],
    )


class SummarizeNoteRequest(CamelModel):
    """Body of the note summary route."""

    content: str | None = Field(
        default=None,
        description="Note text to summarize; HTML is sent as-is",
    )
