"""
Unit Tests for Exception Handlers.

Tests the exception handler functions in isolation.
"""

import json

import pytest
from unittest.mock import MagicMock
from fastapi import Request
from fastapi.exceptions import RequestValidationError

from notelens.backend.core.exception_handlers import (
    application_error_handler,
    validation_error_handler,
    unhandled_exception_handler,
    EXCEPTION_STATUS_MAP,
    _get_request_id,
    status_for,
)
from notelens.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    ExternalServiceError,
    FeatureDisabledError,
    InvalidYouTubeUrlError,
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
)


class TestExceptionStatusMapping:
    """Tests for exception to HTTP status code mapping."""

    def test_not_found_maps_to_404(self):
        assert EXCEPTION_STATUS_MAP[NotFoundError] == 404

    def test_validation_maps_to_400(self):
        assert EXCEPTION_STATUS_MAP[ValidationError] == 400

    def test_subclass_inherits_parent_status(self):
        assert InvalidYouTubeUrlError not in EXCEPTION_STATUS_MAP
        assert status_for(InvalidYouTubeUrlError("https://example.com")) == 400

    def test_unmapped_error_is_500(self):
        assert status_for(ApplicationError("boom")) == 500

    def test_authentication_maps_to_401(self):
        assert EXCEPTION_STATUS_MAP[AuthenticationError] == 401

    def test_feature_disabled_maps_to_403(self):
        assert EXCEPTION_STATUS_MAP[FeatureDisabledError] == 403

    def test_external_service_maps_to_502(self):
        assert EXCEPTION_STATUS_MAP[ExternalServiceError] == 502

    def test_payload_too_large_maps_to_413(self):
        assert EXCEPTION_STATUS_MAP[PayloadTooLargeError] == 413


class TestGetRequestId:
    """Tests for request ID extraction."""

    def test_extracts_from_request_state(self):
        request = MagicMock(spec=Request)
        request.state.request_id = "state-123"
        request.headers = {}

        assert _get_request_id(request) == "state-123"

    def test_extracts_from_header(self):
        request = MagicMock(spec=Request)
        del request.state.request_id
        request.headers = {"x-request-id": "header-456"}

        assert _get_request_id(request) == "header-456"

    def test_returns_none_when_not_present(self):
        request = MagicMock(spec=Request)
        del request.state.request_id
        request.headers = {}

        assert _get_request_id(request) is None


class TestApplicationErrorHandler:
    """Tests for application_error_handler."""

    @pytest.fixture
    def mock_request(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/notes/abc"
        request.method = "GET"
        request.headers = {"x-request-id": "test-123"}
        del request.state.request_id
        return request

    async def test_not_found_returns_404_envelope(self, mock_request):
        response = await application_error_handler(mock_request, NotFoundError("Note not found"))

        assert response.status_code == 404
        body = json.loads(response.body)
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]["code"] == "RES_NOT_FOUND"
        assert body["error"]["message"] == "Note not found"

    async def test_authentication_returns_401(self, mock_request):
        response = await application_error_handler(mock_request, AuthenticationError())

        assert response.status_code == 401
        assert json.loads(response.body)["error"]["code"] == "AUTH_UNAUTHORIZED"

    async def test_validation_includes_details(self, mock_request):
        exc = ValidationError(
            "Unsupported file type",
            details={"content_type": "text/plain"},
        )

        response = await application_error_handler(mock_request, exc)

        assert response.status_code == 400
        error = json.loads(response.body)["error"]
        assert error["code"] == "VAL_VALIDATION_ERROR"
        assert error["details"] == {"content_type": "text/plain"}

    async def test_invalid_youtube_url_keeps_its_code(self, mock_request):
        response = await application_error_handler(
            mock_request, InvalidYouTubeUrlError("https://example.com")
        )

        assert response.status_code == 400
        error = json.loads(response.body)["error"]
        assert error["code"] == "VAL_INVALID_URL"
        assert error["message"] == "Invalid YouTube URL"

    async def test_payload_too_large_returns_413(self, mock_request):
        response = await application_error_handler(mock_request, PayloadTooLargeError())

        assert response.status_code == 413

    async def test_response_includes_request_id(self, mock_request):
        response = await application_error_handler(mock_request, NotFoundError("Not found"))

        assert json.loads(response.body)["metadata"]["request_id"] == "test-123"

    async def test_unknown_application_error_returns_500(self, mock_request):
        exc = ApplicationError("Unknown error", code="CUSTOM_ERROR")

        response = await application_error_handler(mock_request, exc)

        assert response.status_code == 500


class TestValidationErrorHandler:
    """Tests for validation_error_handler."""

    @pytest.fixture
    def mock_request(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/folders"
        request.method = "POST"
        request.headers = {}
        del request.state.request_id
        return request

    async def test_returns_422(self, mock_request):
        exc = MagicMock(spec=RequestValidationError)
        exc.errors.return_value = [
            {"loc": ("body", "name"), "msg": "Field required", "type": "missing"}
        ]

        response = await validation_error_handler(mock_request, exc)

        assert response.status_code == 422

    async def test_includes_field_errors(self, mock_request):
        exc = MagicMock(spec=RequestValidationError)
        exc.errors.return_value = [
            {"loc": ("body", "name"), "msg": "too short", "type": "string_too_short"},
            {"loc": ("body", "title"), "msg": "too long", "type": "string_too_long"},
        ]

        response = await validation_error_handler(mock_request, exc)

        error = json.loads(response.body)["error"]
        assert error["code"] == "VAL_REQUEST_INVALID"
        fields = [e["field"] for e in error["details"]["validation_errors"]]
        assert fields == ["body.name", "body.title"]


class TestUnhandledExceptionHandler:
    """Tests for unhandled_exception_handler."""

    @pytest.fixture
    def mock_request(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/notes"
        request.method = "GET"
        request.headers = {}
        del request.state.request_id
        return request

    async def test_returns_500(self, mock_request):
        response = await unhandled_exception_handler(mock_request, RuntimeError("boom"))

        assert response.status_code == 500

    async def test_hides_internal_details(self, mock_request):
        exc = RuntimeError("api key AIza-secret leaked")

        response = await unhandled_exception_handler(mock_request, exc)

        body = response.body.decode()
        assert "AIza-secret" not in body
        assert "SYS_INTERNAL_ERROR" in body
        assert "unexpected error" in body.lower()
