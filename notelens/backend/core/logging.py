"""
Centralized Logging Configuration.

structlog over the stdlib logging tree. Every module gets its logger from
`get_logger(__name__)`; nothing creates standalone loggers. Levels, renderer
and handlers come from config/settings/logging.yaml (validated against
LoggingSchema) and can be overridden by the entry point.

Every record carries timestamp, level, logger, event, func_name and lineno,
plus whatever is bound in structlog contextvars: request_id, frontend,
method and path from RequestContextMiddleware, user_id once the caller is
resolved. Values under the configured `redact_keys` (passwords, the Gemini
key) are masked before rendering.

Usage:
    from notelens.backend.core.logging import get_logger, setup_logging

    setup_logging()                                   # from logging.yaml
    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Note created", extra={"note_id": note.id})

    # Explicit source outside an HTTP request (client, analysis layer)
    log_with_source(logger, "ai", "info", "Analysis completed", kind="pdf")

File output, when enabled, is a single rotating JSONL file (logs/system.jsonl
by default); filter it by the `source` field.
"""

import logging
import sys
from collections.abc import Iterable
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from notelens.backend.core.config import find_project_root, load_yaml_config
from notelens.backend.core.config_schema import LoggingSchema

VALID_SOURCES = frozenset({
    "web",
    "cli",
    "api",
    "ai",
    "internal",
    "unknown",
})
"""Values accepted for the `source` field. Always passed explicitly, never derived."""

REDACTED = "***"

_logging_config: LoggingSchema | None = None

# Chatty third-party loggers capped at WARNING
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "pypdf")


def _load_logging_config() -> LoggingSchema:
    """
    Load and validate config/settings/logging.yaml once per process.

    Raises:
        FileNotFoundError: If logging.yaml does not exist
        pydantic.ValidationError: If the file does not match LoggingSchema
    """
    global _logging_config
    if _logging_config is None:
        _logging_config = LoggingSchema(**load_yaml_config("logging.yaml"))
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    """Resolve the log file path relative to project root."""
    return find_project_root() / configured_path


class RedactKeys:
    """Processor masking the values of sensitive event keys, including inside `extra`."""

    def __init__(self, keys: Iterable[str]) -> None:
        self._keys = frozenset(key.lower() for key in keys)

    def _mask(self, values: dict[str, Any]) -> dict[str, Any]:
        return {
            key: REDACTED if key.lower() in self._keys and value is not None else value
            for key, value in values.items()
        }

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if not self._keys:
            return event_dict
        masked = self._mask(event_dict)
        extra = masked.get("extra")
        if isinstance(extra, dict):
            masked["extra"] = self._mask(extra)
        return masked


def _shared_processors(redact_keys: Iterable[str]) -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
        RedactKeys(redact_keys),
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Arguments left as None take their value from logging.yaml.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: Console renderer, 'json' or 'console'. The file is always JSON.
        enable_console: Write to stdout
        enable_file_logging: Write to the rotating JSONL file
    """
    config = _load_logging_config()
    handlers = config.handlers

    effective_level = level or config.level
    effective_format = format_type or config.format
    console_enabled = handlers.console.enabled if enable_console is None else enable_console
    file_enabled = handlers.file.enabled if enable_file_logging is None else enable_file_logging

    processors = _shared_processors(config.redact_keys)

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), processors)
    if effective_format == "console":
        console_formatter = _formatter(structlog.dev.ConsoleRenderer(colors=True), processors)
    else:
        console_formatter = json_formatter

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, effective_level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if console_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if file_enabled:
        log_path = _resolve_log_path(handlers.file.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=handlers.file.max_bytes,
            backupCount=handlers.file.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Return the structlog logger for `name` (normally `__name__`)."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log `message` with an explicit `source` field.

    For code that runs outside a request, or needs its own source: the API
    client logs as "api", the analysis layer as "ai".

    Raises:
        AttributeError: If level is not a valid log level
    """
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
