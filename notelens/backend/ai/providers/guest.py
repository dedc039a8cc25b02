"""
Guest Analysis Provider.

Used when no GEMINI_API_KEY is configured. Returns fixed, kind-typed
results telling the operator how to enable real analysis. Never touches
the uploaded file and never raises.
"""

from pathlib import Path

from notelens.backend.ai.providers.base import AnalysisProvider, ProviderAnalysis

_GUEST_NOTE = "AI analysis unavailable in guest mode"


class GuestAnalysisProvider(AnalysisProvider):
    mode = "guest"

    async def analyze_image(self, path: Path, mime_type: str) -> ProviderAnalysis:
        return ProviderAnalysis(
            summary="Image uploaded successfully - configure GEMINI_API_KEY for AI analysis",
            key_points=["Image file identified", _GUEST_NOTE],
            confidence=0.8,
        )

    async def analyze_pdf(self, path: Path) -> ProviderAnalysis:
        return ProviderAnalysis(
            summary="PDF uploaded successfully - configure GEMINI_API_KEY for AI analysis",
            key_points=["PDF file identified", _GUEST_NOTE],
            confidence=0.8,
        )

    async def analyze_audio(self, path: Path, mime_type: str) -> ProviderAnalysis:
        return ProviderAnalysis(
            summary="Audio uploaded successfully - configure GEMINI_API_KEY for AI analysis",
            key_points=["Audio file identified", _GUEST_NOTE],
            confidence=0.7,
        )

    async def analyze_youtube(self, video_id: str) -> ProviderAnalysis:
        return ProviderAnalysis(
            summary=f"YouTube video identified: {video_id} - configure GEMINI_API_KEY for AI analysis",
            key_points=["Valid YouTube URL", _GUEST_NOTE],
            confidence=0.7,
        )

    async def summarize_note(self, content: str) -> ProviderAnalysis:
        return ProviderAnalysis(
            summary="Note received - configure GEMINI_API_KEY for AI summaries",
            key_points=["Note content available", "AI summary unavailable in guest mode"],
            confidence=0.9,
        )
