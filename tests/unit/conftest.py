"""
Unit Test Fixtures.

Fixtures for unit tests. No HTTP app is started and no network is used;
model calls go to pydantic-ai's TestModel.
"""

from pathlib import Path

import pytest

from notelens.backend.ai.service import AIAnalysisService
from notelens.backend.ai.providers.guest import GuestAnalysisProvider
from notelens.backend.core.config_schema import AllowedTypesSchema, UploadsSchema


# =============================================================================
# Analysis Fixtures
# =============================================================================


@pytest.fixture
def guest_analysis() -> AIAnalysisService:
    """Analysis service in guest mode (no API key)."""
    return AIAnalysisService(GuestAnalysisProvider())


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """A small file to stand in for an upload on disk."""
    path = tmp_path / "sample.bin"
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 64)
    return path


# =============================================================================
# Upload Fixtures
# =============================================================================


@pytest.fixture
def upload_settings(tmp_path: Path) -> UploadsSchema:
    """Upload settings writing into the test's temp directory with a 1 KB ceiling."""
    return UploadsSchema(
        max_file_size_bytes=1024,
        temp_dir=str(tmp_path / "uploads"),
        chunk_size_bytes=256,
        allowed_types=AllowedTypesSchema(
            image=["image/jpeg", "image/png"],
            pdf=["application/pdf"],
            audio=["audio/mpeg", "audio/wav"],
        ),
    )
