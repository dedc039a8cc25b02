"""
Integration Test Fixtures.

Runs the real FastAPI app in-process over httpx's ASGITransport. The
entity store, the analysis service and the configuration are replaced through
`app.dependency_overrides`: a fresh MemoryEntityStore per test and the
guest analysis provider, so no network or API key is needed.
"""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from notelens.backend.ai.providers.guest import GuestAnalysisProvider
from notelens.backend.ai.service import AIAnalysisService, get_analysis_service
from notelens.backend.core.config import AppConfig
from notelens.backend.core.dependencies import get_config, get_entity_store
from notelens.backend.repositories.store import MemoryEntityStore


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def analysis_service() -> AIAnalysisService:
    """Analysis service the app will use; replace in a test to inject another provider."""
    return AIAnalysisService(GuestAnalysisProvider())


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """
    Real configuration with uploads redirected into the test's temp directory.

    Tests may swap sections before making requests:
        app_config._features = app_config.features.model_copy(update={...})
    """
    config = AppConfig()
    config._uploads = config.uploads.model_copy(update={"temp_dir": str(tmp_path / "uploads")})
    return config


@pytest.fixture
def app(
    store: MemoryEntityStore,
    analysis_service: AIAnalysisService,
    app_config: AppConfig,
) -> Generator[FastAPI, None, None]:
    """Application wired to the per-test store, analysis service and config."""
    from notelens.backend.main import create_app

    application = create_app()
    application.dependency_overrides[get_entity_store] = lambda: store
    application.dependency_overrides[get_analysis_service] = lambda: analysis_service
    application.dependency_overrides[get_config] = lambda: app_config
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client bound to the app.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return {"x-user-id": "alice"}


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return {"x-user-id": "bob"}


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a schema validation error (422)."""
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
