"""
AI Analysis Service.

Single entry point for content analysis. Wraps an AnalysisProvider chosen
once at construction (guest or live) and guarantees every call returns a
well-formed AIAnalysisResult:

    - provider output is normalized (placeholders, default key points,
      default confidence, clamping to [0, 1], `type` set to the kind)
    - a missing capability yields a kind-typed "unavailable" result
    - any other failure yields an error result (`type="error"`)

The only exception that escapes is InvalidYouTubeUrlError, raised before
the provider is called.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from notelens.backend.ai.capabilities import (
    ModelTranscriber,
    OEmbedMetadataFetcher,
    PypdfTextExtractor,
    TextExtractor,
    Transcriber,
    UnavailableTextExtractor,
    UnavailableTranscriber,
    UnavailableVideoMetadataFetcher,
    VideoMetadataFetcher,
)
from notelens.backend.ai.providers.base import AnalysisProvider, ProviderAnalysis
from notelens.backend.ai.providers.gemini import LiveAnalysisProvider
from notelens.backend.ai.providers.guest import GuestAnalysisProvider
from notelens.backend.ai.youtube import extract_video_id
from notelens.backend.core.config import AppConfig, Settings, get_app_config, get_settings
from notelens.backend.core.exceptions import CapabilityUnavailableError, InvalidYouTubeUrlError
from notelens.backend.core.logging import get_logger, log_with_source
from notelens.backend.schemas.analysis import AIAnalysisResult, AnalysisKind

logger = get_logger(__name__)


@dataclass(frozen=True)
class KindProfile:
    """Defaults and fallback wording for one content kind."""

    placeholder: str
    default_key_points: tuple[str, ...]
    default_confidence: float
    error_summary: str
    unavailable_summary: str


KIND_PROFILES: dict[str, KindProfile] = {
    "image": KindProfile(
        placeholder="Image analyzed",
        default_key_points=(),
        default_confidence=0.8,
        error_summary="Error while analyzing the image",
        unavailable_summary="Image analysis is not available on this server",
    ),
    "pdf": KindProfile(
        placeholder="Document analyzed",
        default_key_points=(),
        default_confidence=0.8,
        error_summary="Error while analyzing the PDF",
        unavailable_summary="PDF text extraction is not available on this server",
    ),
    "audio": KindProfile(
        placeholder="Audio file analyzed",
        default_key_points=("Audio file processed",),
        default_confidence=0.7,
        error_summary="Error while analyzing the audio",
        unavailable_summary="Audio transcription is not available on this server",
    ),
    "youtube": KindProfile(
        placeholder="YouTube video analyzed",
        default_key_points=("Video content identified",),
        default_confidence=0.7,
        error_summary="Error while analyzing the YouTube video",
        unavailable_summary="YouTube analysis is not available on this server",
    ),
    "note-summary": KindProfile(
        placeholder="Note summarized",
        default_key_points=(),
        default_confidence=0.95,
        error_summary="Error while summarizing the note",
        unavailable_summary="Note summaries are not available on this server",
    ),
}


def normalize(kind: AnalysisKind, raw: ProviderAnalysis) -> AIAnalysisResult:
    """Fill gaps in a provider analysis with the kind's defaults."""
    profile = KIND_PROFILES[kind]

    summary = raw.summary.strip() if raw.summary and raw.summary.strip() else profile.placeholder
    key_points = raw.key_points if raw.key_points is not None else list(profile.default_key_points)
    confidence = raw.confidence if raw.confidence is not None else profile.default_confidence

    return AIAnalysisResult(
        summary=summary,
        key_points=key_points,
        confidence=min(max(confidence, 0.0), 1.0),
        type=kind,
    )


def error_result(kind: AnalysisKind) -> AIAnalysisResult:
    return AIAnalysisResult(
        summary=KIND_PROFILES[kind].error_summary,
        key_points=[],
        confidence=0.0,
        type="error",
    )


def unavailable_result(kind: AnalysisKind) -> AIAnalysisResult:
    return AIAnalysisResult(
        summary=KIND_PROFILES[kind].unavailable_summary,
        key_points=[],
        confidence=0.0,
        type=kind,
    )


class AIAnalysisService:
    """Analysis facade used by the AI routes."""

    def __init__(self, provider: AnalysisProvider) -> None:
        self._provider = provider

    @property
    def mode(self) -> str:
        """`guest` or `live`."""
        return self._provider.mode

    async def _run(
        self,
        kind: AnalysisKind,
        call: Callable[[], Awaitable[ProviderAnalysis]],
    ) -> AIAnalysisResult:
        try:
            raw = await call()
        except CapabilityUnavailableError as e:
            logger.warning(
                "Analysis capability unavailable",
                extra={"kind": kind, "capability": e.capability},
            )
            return unavailable_result(kind)
        except Exception as e:
            logger.exception(
                "Analysis failed",
                extra={"kind": kind, "mode": self.mode, "error_type": type(e).__name__},
            )
            return error_result(kind)

        result = normalize(kind, raw)
        log_with_source(
            logger, "ai", "info", "Analysis completed",
            kind=kind, mode=self.mode, confidence=result.confidence,
        )
        return result

    async def analyze_image(self, path: Path, mime_type: str) -> AIAnalysisResult:
        return await self._run("image", lambda: self._provider.analyze_image(path, mime_type))

    async def analyze_pdf(self, path: Path) -> AIAnalysisResult:
        return await self._run("pdf", lambda: self._provider.analyze_pdf(path))

    async def analyze_audio(self, path: Path, mime_type: str) -> AIAnalysisResult:
        return await self._run("audio", lambda: self._provider.analyze_audio(path, mime_type))

    async def analyze_youtube(self, url: str) -> AIAnalysisResult:
        """
        Analyze a YouTube video from its URL.

        Raises:
            InvalidYouTubeUrlError: If no video id can be extracted from `url`
        """
        video_id = extract_video_id(url)
        if video_id is None:
            raise InvalidYouTubeUrlError(url)
        return await self._run("youtube", lambda: self._provider.analyze_youtube(video_id))

    async def summarize_note(self, content: str) -> AIAnalysisResult:
        return await self._run("note-summary", lambda: self._provider.summarize_note(content))


# =============================================================================
# Construction
# =============================================================================


def _build_text_extractor(config: AppConfig) -> TextExtractor:
    if config.ai.capabilities.text_extractor == "pypdf":
        return PypdfTextExtractor(max_chars=config.ai.max_document_chars)
    return UnavailableTextExtractor()


def _build_transcriber(config: AppConfig, model) -> Transcriber:
    if config.ai.capabilities.transcriber == "model":
        return ModelTranscriber(model)
    return UnavailableTranscriber()


def _build_metadata_fetcher(config: AppConfig) -> VideoMetadataFetcher:
    if config.ai.capabilities.video_metadata == "oembed":
        return OEmbedMetadataFetcher(
            endpoint=config.ai.oembed_endpoint,
            timeout=config.application.timeouts.external_api,
        )
    return UnavailableVideoMetadataFetcher()


def build_analysis_service(settings: Settings, config: AppConfig, model=None) -> AIAnalysisService:
    """
    Choose the provider once: guest without a Gemini key, live otherwise.

    Args:
        settings: Secrets (the Gemini key)
        config: Application config (model name, language, capabilities)
        model: Optional pydantic-ai model overriding the configured Gemini model
    """
    if model is None and not settings.has_gemini_key:
        logger.warning("GEMINI_API_KEY not configured, AI analysis runs in guest mode")
        return AIAnalysisService(GuestAnalysisProvider())

    if model is None:
        from pydantic_ai.models.google import GoogleModel
        from pydantic_ai.providers.google import GoogleProvider

        model = GoogleModel(
            config.ai.model_name,
            provider=GoogleProvider(api_key=settings.gemini_key()),
        )

    provider = LiveAnalysisProvider(
        model,
        language=config.ai.language,
        text_extractor=_build_text_extractor(config),
        transcriber=_build_transcriber(config, model),
        metadata_fetcher=_build_metadata_fetcher(config),
    )
    logger.info("AI analysis running in live mode", extra={"model": config.ai.model_name})
    return AIAnalysisService(provider)


@lru_cache
def get_analysis_service() -> AIAnalysisService:
    """Process-wide analysis service."""
    return build_analysis_service(get_settings(), get_app_config())
