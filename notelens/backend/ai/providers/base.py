"""
Analysis Provider Interface.

A provider turns one piece of content into a loosely-shaped
ProviderAnalysis. It is allowed to raise; AIAnalysisService catches
failures and normalizes whatever comes back into an AIAnalysisResult.
"""

import math
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

NON_AUTHORITATIVE_NOTE = (
    "Video details could not be retrieved; this summary is a guess based on the video id only"
)
NON_AUTHORITATIVE_CONFIDENCE_CAP = 0.5


class ProviderAnalysis(BaseModel):
    """
    Raw analysis as a provider returns it.

    Every field is optional and malformed values are dropped to None so the
    service can substitute per-kind defaults instead of failing.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    summary: str | None = Field(default=None, description="Short prose summary")
    key_points: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("key_points", "keyPoints"),
        description="Most important points, one sentence each",
    )
    confidence: float | None = Field(
        default=None,
        description="Confidence in the analysis, between 0 and 1",
    )

    @field_validator("summary", mode="before")
    @classmethod
    def _coerce_summary(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("key_points", mode="before")
    @classmethod
    def _coerce_key_points(cls, value: Any) -> list[str] | None:
        if not isinstance(value, list):
            return None
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> float | None:
        if isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return None if math.isnan(number) else number


def flag_non_authoritative(analysis: ProviderAnalysis) -> ProviderAnalysis:
    """Mark an analysis made without real content: lead with a caveat, cap confidence."""
    confidence = analysis.confidence
    if confidence is None or confidence > NON_AUTHORITATIVE_CONFIDENCE_CAP:
        confidence = NON_AUTHORITATIVE_CONFIDENCE_CAP
    return analysis.model_copy(
        update={
            "key_points": [NON_AUTHORITATIVE_NOTE, *(analysis.key_points or [])],
            "confidence": confidence,
        }
    )


class AnalysisProvider(ABC):
    """Produces analyses for each supported content kind."""

    mode: str

    @abstractmethod
    async def analyze_image(self, path: Path, mime_type: str) -> ProviderAnalysis: ...

    @abstractmethod
    async def analyze_pdf(self, path: Path) -> ProviderAnalysis: ...

    @abstractmethod
    async def analyze_audio(self, path: Path, mime_type: str) -> ProviderAnalysis: ...

    @abstractmethod
    async def analyze_youtube(self, video_id: str) -> ProviderAnalysis: ...

    @abstractmethod
    async def summarize_note(self, content: str) -> ProviderAnalysis: ...
