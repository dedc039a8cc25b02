"""
Configuration Management.

Two sources, kept apart:

    config/.env (or the process environment)   secrets, via pydantic-settings
    config/settings/*.yaml                     everything else, via PyYAML

Each YAML file is validated against its schema in config_schema.py when
AppConfig is built, so a typo or a missing key stops the process at startup.

Secrets:
    GEMINI_API_KEY   optional; when blank the AI layer runs in guest mode

Settings files:
    application.yaml   identity, server, cors, api prefix, timeouts
    logging.yaml       level, renderer, handlers, redacted keys
    features.yaml      feature flags
    ai.yaml            model, response language, analysis capabilities
    uploads.yaml       size ceiling, temp directory, MIME allow-lists
    concurrency.yaml   thread pool and semaphore sizing

All paths are resolved from the directory holding the .project_root marker.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notelens.backend.core.config_schema import (
    AISchema,
    ApplicationSchema,
    ConcurrencySchema,
    FeaturesSchema,
    LoggingSchema,
    UploadsSchema,
)

PROJECT_ROOT_MARKER = ".project_root"

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from `start` (default: cwd) to the first directory holding .project_root."""
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / PROJECT_ROOT_MARKER).exists():
            return candidate
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """find_project_root() for entry scripts: exits with a readable message instead of raising."""
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """
    Read config/settings/<filename>. An empty file yields {}.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    config_path = find_project_root() / "config" / "settings" / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets only. Values never appear in repr() or logs."""

    gemini_api_key: SecretStr = SecretStr("")

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def gemini_key(self) -> str:
        """The Gemini API key in clear text, stripped."""
        return self.gemini_api_key.get_secret_value().strip()

    @property
    def has_gemini_key(self) -> bool:
        return bool(self.gemini_key())


def _load_validated(schema_cls: type[SchemaT], filename: str) -> SchemaT:
    """
    Load one settings file into its schema.

    Raises:
        ValueError: Naming the file, when validation fails
    """
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """Validated view of config/settings/. Sections are read once, at construction."""

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._features = _load_validated(FeaturesSchema, "features.yaml")
        self._ai = _load_validated(AISchema, "ai.yaml")
        self._uploads = _load_validated(UploadsSchema, "uploads.yaml")
        self._concurrency = _load_validated(ConcurrencySchema, "concurrency.yaml")

    @property
    def application(self) -> ApplicationSchema:
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        return self._logging

    @property
    def features(self) -> FeaturesSchema:
        return self._features

    @property
    def ai(self) -> AISchema:
        """Model, response language and capability selection."""
        return self._ai

    @property
    def uploads(self) -> UploadsSchema:
        return self._uploads

    @property
    def concurrency(self) -> ConcurrencySchema:
        return self._concurrency


@lru_cache
def get_settings() -> Settings:
    """Process-wide secrets, read from <project root>/config/.env and the environment."""
    return Settings(_env_file=str(find_project_root() / "config" / ".env"))


@lru_cache
def get_app_config() -> AppConfig:
    """Process-wide AppConfig."""
    return AppConfig()


def get_server_base_url() -> tuple[str, float]:
    """(base URL, timeout in seconds) for clients of the local backend."""
    app = get_app_config().application
    return f"http://{app.server.host}:{app.server.port}", float(app.timeouts.external_api)
