"""
Configuration Schemas.

One pydantic model per file in config/settings/, checked when AppConfig is
built. Unknown keys are rejected (extra="forbid") so a misspelled option
fails at startup instead of being silently ignored.

    application.yaml   ApplicationSchema
    logging.yaml       LoggingSchema
    features.yaml      FeaturesSchema
    ai.yaml            AISchema
    uploads.yaml       UploadsSchema
    concurrency.yaml   ConcurrencySchema
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

PositiveInt = Annotated[int, Field(gt=0)]

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class _StrictBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int = Field(ge=1, le=65535)


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    # Seconds; also the default timeout of NotelensClient.
    external_api: PositiveInt


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str = Field(pattern=r"^/")
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: PositiveInt
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: LogLevel
    format: Literal["json", "console"]
    handlers: HandlersSchema
    redact_keys: list[str] = []


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    api_request_logging: bool
    ai_analysis_enabled: bool
    user_registration_enabled: bool


# =============================================================================
# ai.yaml
# =============================================================================


class CapabilitiesSchema(_StrictBase):
    """Backend per analysis capability; "unavailable" selects the explicit stub."""

    text_extractor: Literal["pypdf", "unavailable"]
    transcriber: Literal["model", "unavailable"]
    video_metadata: Literal["oembed", "unavailable"]


class AISchema(_StrictBase):
    model_name: str
    language: str
    oembed_endpoint: str
    max_document_chars: PositiveInt
    capabilities: CapabilitiesSchema


# =============================================================================
# uploads.yaml
# =============================================================================


class AllowedTypesSchema(_StrictBase):
    """MIME allow-list per upload route."""

    image: list[str]
    pdf: list[str]
    audio: list[str]


class UploadsSchema(_StrictBase):
    max_file_size_bytes: PositiveInt
    temp_dir: str
    chunk_size_bytes: PositiveInt
    allowed_types: AllowedTypesSchema


# =============================================================================
# concurrency.yaml
# =============================================================================


class ThreadPoolSchema(_StrictBase):
    max_workers: PositiveInt


class SemaphoresSchema(_StrictBase):
    llm: PositiveInt
    external_api: PositiveInt


class ConcurrencySchema(_StrictBase):
    thread_pool: ThreadPoolSchema
    semaphores: SemaphoresSchema
