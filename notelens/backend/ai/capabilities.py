"""
Analysis Capabilities.

Pluggable helpers the live provider depends on for work the model call
alone does not cover:

    TextExtractor        - PDF file -> plain text
    Transcriber          - audio file -> transcript
    VideoMetadataFetcher - YouTube video id -> public title/author

Each has a working implementation and an `Unavailable*` stub that raises
CapabilityUnavailableError. Which one is used is selected in
config/settings/ai.yaml under `capabilities`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import httpx
from pydantic_ai import Agent, BinaryContent
from pydantic_ai.models import Model
from pypdf import PdfReader

from notelens.backend.ai.youtube import watch_url
from notelens.backend.core.concurrency import get_semaphore, run_blocking
from notelens.backend.core.exceptions import CapabilityUnavailableError, ExternalServiceError
from notelens.backend.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class VideoMetadata:
    """Public metadata for a YouTube video."""

    title: str
    author_name: str | None = None


# =============================================================================
# Text extraction
# =============================================================================


class TextExtractor(ABC):
    """Extracts plain text from a document on disk."""

    @abstractmethod
    async def extract(self, path: Path) -> str: ...


def _read_pdf_text(path: Path) -> str:
    reader = PdfReader(path)
    pages = [page.extract_text() or "" for page in reader.pages]
    return "\n\n".join(text.strip() for text in pages if text.strip())


class PypdfTextExtractor(TextExtractor):
    """Extracts the text layer of a PDF with pypdf, in the I/O thread pool."""

    def __init__(self, max_chars: int) -> None:
        self._max_chars = max_chars

    async def extract(self, path: Path) -> str:
        text = await run_blocking(_read_pdf_text, path)
        if len(text) > self._max_chars:
            logger.debug(
                "Document text truncated",
                extra={"chars": len(text), "max_chars": self._max_chars},
            )
            text = text[: self._max_chars]
        return text


class UnavailableTextExtractor(TextExtractor):
    async def extract(self, path: Path) -> str:
        raise CapabilityUnavailableError("text_extractor")


# =============================================================================
# Transcription
# =============================================================================


class Transcriber(ABC):
    """Turns an audio file into a transcript."""

    @abstractmethod
    async def transcribe(self, path: Path, mime_type: str) -> str: ...


TRANSCRIBE_INSTRUCTIONS = (
    "You transcribe audio recordings. Return only the spoken words as plain text, "
    "without commentary. If nothing intelligible is spoken, return an empty string."
)


class ModelTranscriber(Transcriber):
    """Transcribes audio by sending it inline to a multimodal model."""

    def __init__(self, model: Model | str) -> None:
        self._agent = Agent(model, output_type=str, instructions=TRANSCRIBE_INSTRUCTIONS)

    async def transcribe(self, path: Path, mime_type: str) -> str:
        data = await run_blocking(path.read_bytes)
        async with get_semaphore("llm"):
            result = await self._agent.run(
                ["Transcribe this recording.", BinaryContent(data=data, media_type=mime_type)]
            )
        return result.output.strip()


class UnavailableTranscriber(Transcriber):
    async def transcribe(self, path: Path, mime_type: str) -> str:
        raise CapabilityUnavailableError("transcriber")


# =============================================================================
# Video metadata
# =============================================================================


class VideoMetadataFetcher(ABC):
    """Looks up public metadata for a YouTube video."""

    @abstractmethod
    async def fetch(self, video_id: str) -> VideoMetadata: ...


class OEmbedMetadataFetcher(VideoMetadataFetcher):
    """
    Fetches title and channel name from YouTube's public oEmbed endpoint.

    No API key is needed. Private, removed and age-restricted videos
    answer with a 4xx, surfaced as httpx.HTTPStatusError. A 200 that is not
    a JSON object with a title raises ExternalServiceError.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, video_id: str) -> VideoMetadata:
        params = {"url": watch_url(video_id), "format": "json"}
        async with get_semaphore("external_api"):
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._endpoint, params=params)
                response.raise_for_status()

        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalServiceError("oEmbed answered with a non-JSON body") from e
        if not isinstance(payload, dict):
            raise ExternalServiceError("oEmbed answered with an unexpected payload")

        title = payload.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ExternalServiceError("oEmbed payload has no title")

        author_name = payload.get("author_name")
        return VideoMetadata(
            title=title.strip(),
            author_name=author_name if isinstance(author_name, str) and author_name else None,
        )


class UnavailableVideoMetadataFetcher(VideoMetadataFetcher):
    async def fetch(self, video_id: str) -> VideoMetadata:
        raise CapabilityUnavailableError("video_metadata")
