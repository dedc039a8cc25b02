"""
Live Analysis Provider.

Sends content to a multimodal model through pydantic-ai and asks for a
structured ProviderAnalysis back. Images go inline; PDFs and audio are
first reduced to text by the configured capabilities.

Usage:
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    model = GoogleModel("gemini-2.5-flash", provider=GoogleProvider(api_key=key))
    provider = LiveAnalysisProvider(model, language="English", ...)
    analysis = await provider.summarize_note("<p>...</p>")
"""

from pathlib import Path

import httpx
from pydantic_ai import Agent, BinaryContent
from pydantic_ai.models import Model

from notelens.backend.ai.capabilities import (
    TextExtractor,
    Transcriber,
    VideoMetadata,
    VideoMetadataFetcher,
)
from notelens.backend.ai.providers.base import (
    AnalysisProvider,
    ProviderAnalysis,
    flag_non_authoritative,
)
from notelens.backend.core.concurrency import get_semaphore, run_blocking
from notelens.backend.core.exceptions import CapabilityUnavailableError, ExternalServiceError
from notelens.backend.core.logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You analyze content a user attached to their notes and return a structured summary.\n\n"
    "Rules:\n"
    "- summary: two to four sentences capturing the essence of the content\n"
    "- key_points: the most important points, one short sentence each\n"
    "- confidence: a number between 0 and 1 for how sure you are of the analysis\n"
    "- Write the summary and key points in {language}\n"
    "- Never invent details that are not supported by the content"
)


class LiveAnalysisProvider(AnalysisProvider):
    """
    Model-backed provider.

    Args:
        model: pydantic-ai model (GoogleModel in production, TestModel in tests)
        language: Language the summaries are written in
        text_extractor: PDF text source
        transcriber: Audio transcript source
        metadata_fetcher: YouTube metadata source
    """

    mode = "live"

    def __init__(
        self,
        model: Model | str,
        *,
        language: str,
        text_extractor: TextExtractor,
        transcriber: Transcriber,
        metadata_fetcher: VideoMetadataFetcher,
    ) -> None:
        self._agent: Agent[None, ProviderAnalysis] = Agent(
            model,
            output_type=ProviderAnalysis,
            instructions=SYSTEM_PROMPT.format(language=language),
        )
        self._text_extractor = text_extractor
        self._transcriber = transcriber
        self._metadata_fetcher = metadata_fetcher

    async def _ask(self, prompt: str | list) -> ProviderAnalysis:
        async with get_semaphore("llm"):
            result = await self._agent.run(prompt)

        usage = result.usage()
        logger.debug(
            "Model analysis completed",
            extra={"input_tokens": usage.input_tokens, "output_tokens": usage.output_tokens},
        )
        return result.output

    async def analyze_image(self, path: Path, mime_type: str) -> ProviderAnalysis:
        data = await run_blocking(path.read_bytes)
        return await self._ask(
            [
                "Describe and analyze this image.",
                BinaryContent(data=data, media_type=mime_type),
            ]
        )

    async def analyze_pdf(self, path: Path) -> ProviderAnalysis:
        text = await self._text_extractor.extract(path)
        if not text:
            return ProviderAnalysis(
                summary="The document has no extractable text",
                key_points=[],
            )
        return await self._ask(f"Analyze this document text:\n\n{text}")

    async def analyze_audio(self, path: Path, mime_type: str) -> ProviderAnalysis:
        transcript = await self._transcriber.transcribe(path, mime_type)
        if not transcript:
            return ProviderAnalysis(
                summary="No speech was recognized in the recording",
                key_points=[],
            )
        return await self._ask(f"Analyze this audio transcript:\n\n{transcript}")

    async def _video_metadata(self, video_id: str) -> VideoMetadata | None:
        try:
            return await self._metadata_fetcher.fetch(video_id)
        except CapabilityUnavailableError:
            return None
        except (httpx.HTTPError, ExternalServiceError) as e:
            logger.warning(
                "Video metadata lookup failed",
                extra={"video_id": video_id, "error": str(e)},
            )
            return None

    async def analyze_youtube(self, video_id: str) -> ProviderAnalysis:
        metadata = await self._video_metadata(video_id)
        if metadata is None:
            analysis = await self._ask(
                f"Only the id of a YouTube video is known: {video_id}. "
                "Give your best guess of what it might contain and say that it is a guess."
            )
            return flag_non_authoritative(analysis)

        details = f"Title: {metadata.title}"
        if metadata.author_name:
            details += f"\nChannel: {metadata.author_name}"
        return await self._ask(f"Analyze this YouTube video from its public details:\n\n{details}")

    async def summarize_note(self, content: str) -> ProviderAnalysis:
        return await self._ask(
            "Summarize this note, keeping the most important information. "
            f"It may contain HTML markup:\n\n{content}"
        )
