"""
FastAPI Dependencies.

Shared dependencies for request handling. Tests replace the store and
the analysis service through `app.dependency_overrides`.
"""

import uuid
from typing import Annotated

import structlog
from fastapi import Depends, Header, Request

from notelens.backend.ai.service import AIAnalysisService, get_analysis_service
from notelens.backend.core.config import AppConfig, get_app_config
from notelens.backend.core.exceptions import FeatureDisabledError
from notelens.backend.core.logging import get_logger
from notelens.backend.core.security import Principal, principal_from_header
from notelens.backend.repositories.store import EntityStore, get_store
from notelens.backend.services.folder import FolderService
from notelens.backend.services.note import NoteService
from notelens.backend.services.user import UserService

logger = get_logger(__name__)


async def get_request_id(request: Request) -> str:
    """
    Correlation id for the response envelope.

    The id RequestContextMiddleware assigned, so `metadata.request_id` and
    the X-Request-ID header agree. Without the middleware, the incoming
    header or a fresh UUID.
    """
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get("x-request-id") or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_current_principal(x_user_id: str | None = Header(None)) -> Principal:
    """
    Resolve the caller from the x-user-id header.

    The header value is trusted as-is.

    Raises:
        AuthenticationError: If the header is missing or blank
    """
    principal = principal_from_header(x_user_id)
    structlog.contextvars.bind_contextvars(user_id=principal.user_id)
    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def get_entity_store() -> EntityStore:
    """Store used by the request handlers."""
    return get_store()


Store = Annotated[EntityStore, Depends(get_entity_store)]


def get_config() -> AppConfig:
    return get_app_config()


Config = Annotated[AppConfig, Depends(get_config)]


def get_note_service(store: Store) -> NoteService:
    return NoteService(store)


def get_folder_service(store: Store) -> FolderService:
    return FolderService(store)


def get_user_service(store: Store) -> UserService:
    return UserService(store)


NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
FolderServiceDep = Annotated[FolderService, Depends(get_folder_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]


def get_analysis(
    config: Config,
    service: Annotated[AIAnalysisService, Depends(get_analysis_service)],
) -> AIAnalysisService:
    """
    Analysis service, refused when AI analysis is switched off.

    Raises:
        FeatureDisabledError: If features.ai_analysis_enabled is false
    """
    if not config.features.ai_analysis_enabled:
        raise FeatureDisabledError("AI analysis is disabled")
    return service


AnalysisServiceDep = Annotated[AIAnalysisService, Depends(get_analysis)]
