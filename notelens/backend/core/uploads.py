"""
Temporary Uploads.

Streams a multipart upload to a request-scoped file on disk, enforcing the
size ceiling and a MIME allow-list, and removes the file when the request
is done with it.

Usage:
    async with temporary_upload(image, allowed_types=uploads.allowed_types.image,
                                settings=uploads) as path:
        result = await analysis.analyze_image(path, image.content_type)
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import BinaryIO

from fastapi import UploadFile

from notelens.backend.core.concurrency import run_blocking
from notelens.backend.core.config import find_project_root
from notelens.backend.core.config_schema import UploadsSchema
from notelens.backend.core.exceptions import PayloadTooLargeError, ValidationError
from notelens.backend.core.logging import get_logger
from notelens.backend.core.utils import new_id

logger = get_logger(__name__)


def media_type_of(upload: UploadFile) -> str:
    """Declared MIME type without parameters, lowercased."""
    return (upload.content_type or "").split(";")[0].strip().lower()


def resolve_temp_dir(configured: str) -> Path:
    """Upload directory; relative paths are taken from the project root."""
    path = Path(configured)
    if not path.is_absolute():
        path = find_project_root() / path
    return path


def _allocate_path(temp_dir: Path, filename: str | None) -> Path:
    temp_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(filename or "").suffix.lower()
    if not suffix.isascii() or len(suffix) > 10:
        suffix = ""
    return temp_dir / f"{new_id()}{suffix}"


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to remove temporary upload", extra={"path": str(path), "error": str(e)})


def _too_large(settings: UploadsSchema) -> PayloadTooLargeError:
    limit_mb = settings.max_file_size_bytes // (1024 * 1024)
    return PayloadTooLargeError(f"File exceeds the {limit_mb} MB upload limit")


async def _stream_to_disk(upload: UploadFile, path: Path, settings: UploadsSchema) -> int:
    handle: BinaryIO = await run_blocking(open, path, "wb")
    written = 0
    try:
        while chunk := await upload.read(settings.chunk_size_bytes):
            written += len(chunk)
            if written > settings.max_file_size_bytes:
                raise _too_large(settings)
            await run_blocking(handle.write, chunk)
    finally:
        await run_blocking(handle.close)
    return written


@asynccontextmanager
async def temporary_upload(
    upload: UploadFile,
    *,
    allowed_types: list[str],
    settings: UploadsSchema,
) -> AsyncIterator[Path]:
    """
    Save `upload` to a temporary file and yield its path.

    The file is deleted on exit whatever happened inside the block; a
    failed deletion is logged, not raised.

    Raises:
        ValidationError: If the declared MIME type is not in `allowed_types`
        PayloadTooLargeError: If the upload exceeds the configured ceiling
    """
    media_type = media_type_of(upload)
    if media_type not in allowed_types:
        raise ValidationError(
            "Unsupported file type",
            details={"content_type": media_type, "allowed_types": allowed_types},
        )
    if upload.size is not None and upload.size > settings.max_file_size_bytes:
        raise _too_large(settings)

    path = await run_blocking(_allocate_path, resolve_temp_dir(settings.temp_dir), upload.filename)
    try:
        size = await _stream_to_disk(upload, path, settings)
        logger.debug("Upload stored", extra={"path": str(path), "bytes": size, "media_type": media_type})
        yield path
    finally:
        await run_blocking(_discard, path)
