"""
AI Analysis API Endpoints.

Uploads are saved to a temporary file for the duration of the request
and handed to the analysis service by path. Analysis failures come back
as 200 with `type: "error"`; only input problems produce error statuses.
"""

from fastapi import APIRouter, File, UploadFile

from notelens.backend.core.dependencies import (
    AnalysisServiceDep,
    Config,
    CurrentPrincipal,
    RequestId,
)
from notelens.backend.core.exceptions import ValidationError
from notelens.backend.core.logging import get_logger
from notelens.backend.core.uploads import media_type_of, temporary_upload
from notelens.backend.schemas.analysis import (
    AIAnalysisResult,
    SummarizeNoteRequest,
    YouTubeAnalysisRequest,
)
from notelens.backend.schemas.base import ApiResponse, ResponseMetadata

router = APIRouter()
logger = get_logger(__name__)


def _wrap(result: AIAnalysisResult, request_id: str) -> ApiResponse[AIAnalysisResult]:
    return ApiResponse(data=result, metadata=ResponseMetadata(request_id=request_id))


@router.post(
    "/analyze-image",
    response_model=ApiResponse[AIAnalysisResult],
    summary="Analyze an image",
    description="Multipart upload in the `image` field.",
)
async def analyze_image(
    principal: CurrentPrincipal,
    analysis: AnalysisServiceDep,
    config: Config,
    request_id: RequestId,
    image: UploadFile | None = File(None),
) -> ApiResponse[AIAnalysisResult]:
    if image is None:
        raise ValidationError("No image file provided")

    uploads = config.uploads
    async with temporary_upload(image, allowed_types=uploads.allowed_types.image, settings=uploads) as path:
        result = await analysis.analyze_image(path, media_type_of(image))
    return _wrap(result, request_id)


@router.post(
    "/analyze-pdf",
    response_model=ApiResponse[AIAnalysisResult],
    summary="Analyze a PDF",
    description="Multipart upload in the `pdf` field.",
)
async def analyze_pdf(
    principal: CurrentPrincipal,
    analysis: AnalysisServiceDep,
    config: Config,
    request_id: RequestId,
    pdf: UploadFile | None = File(None),
) -> ApiResponse[AIAnalysisResult]:
    if pdf is None:
        raise ValidationError("No PDF file provided")

    uploads = config.uploads
    async with temporary_upload(pdf, allowed_types=uploads.allowed_types.pdf, settings=uploads) as path:
        result = await analysis.analyze_pdf(path)
    return _wrap(result, request_id)


@router.post(
    "/analyze-audio",
    response_model=ApiResponse[AIAnalysisResult],
    summary="Analyze an audio recording",
    description="Multipart upload in the `audio` field.",
)
async def analyze_audio(
    principal: CurrentPrincipal,
    analysis: AnalysisServiceDep,
    config: Config,
    request_id: RequestId,
    audio: UploadFile | None = File(None),
) -> ApiResponse[AIAnalysisResult]:
    if audio is None:
        raise ValidationError("No audio file provided")

    uploads = config.uploads
    async with temporary_upload(audio, allowed_types=uploads.allowed_types.audio, settings=uploads) as path:
        result = await analysis.analyze_audio(path, media_type_of(audio))
    return _wrap(result, request_id)


@router.post(
    "/analyze-youtube",
    response_model=ApiResponse[AIAnalysisResult],
    summary="Analyze a YouTube video",
)
async def analyze_youtube(
    data: YouTubeAnalysisRequest,
    principal: CurrentPrincipal,
    analysis: AnalysisServiceDep,
    request_id: RequestId,
) -> ApiResponse[AIAnalysisResult]:
    if not data.url or not data.url.strip():
        raise ValidationError("No YouTube URL provided")

    result = await analysis.analyze_youtube(data.url.strip())
    return _wrap(result, request_id)


@router.post(
    "/summarize-note",
    response_model=ApiResponse[AIAnalysisResult],
    summary="Summarize note text",
)
async def summarize_note(
    data: SummarizeNoteRequest,
    principal: CurrentPrincipal,
    analysis: AnalysisServiceDep,
    request_id: RequestId,
) -> ApiResponse[AIAnalysisResult]:
    if not data.content:
        raise ValidationError("No content provided")

    result = await analysis.summarize_note(data.content)
    return _wrap(result, request_id)
