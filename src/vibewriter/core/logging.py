"""Structured logging for the VibeWriter assistant.

structlog renders events for people at a terminal (console renderer) or
for log shippers (JSON). ``configure_logging`` takes the application
Settings, so ``VIBEWRITER_LOG_LEVEL``, ``VIBEWRITER_LOG_JSON``,
``VIBEWRITER_LOG_FILE`` and ``VIBEWRITER_DEBUG`` decide the output.

Every event carries the app name and version; a turn additionally binds
``book_id`` and ``turn_id`` through contextvars. Provider credentials are
masked before rendering.

Example:
    >>> from vibewriter.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Tool executed", tool="create_binder_item", book_id=3)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from vibewriter.core.config import Settings


SECRET_FIELDS = frozenset({"api_key", "authorization", "x-api-key"})
"""Event keys whose values never reach the output."""

REDACTED = "***"

_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Chatty below WARNING: one line per pooled connection.
_QUIET_LOGGERS = ("urllib3", "requests")


def redact_secrets(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask credential values, including inside a logged ``headers`` dict."""
    for key in list(event_dict):
        if key.lower() in SECRET_FIELDS:
            event_dict[key] = REDACTED
    headers = event_dict.get("headers")
    if isinstance(headers, dict):
        event_dict["headers"] = {
            name: REDACTED if name.lower() in SECRET_FIELDS else value
            for name, value in headers.items()
        }
    return event_dict


class AppContext:
    """Processor stamping each event with the application name and version."""

    def __init__(self, app: str, version: str) -> None:
        self.app = app
        self.version = version

    def __call__(
        self,
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("app", self.app)
        event_dict.setdefault("version", self.version)
        return event_dict


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    settings: Settings | None = None,
    *,
    level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure structlog and standard-library logging.

    Args:
        settings: Application settings; defaults to ``get_settings()``.
        level: Overrides ``settings.effective_log_level``.
        json_format: Overrides ``settings.log_json``.
        log_file: Overrides ``settings.log_file``.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    if settings is None:
        from vibewriter.core.config import get_settings

        settings = get_settings()

    level_name = (level or settings.effective_log_level).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    use_json = settings.log_json if json_format is None else json_format
    file_path = log_file or settings.log_file

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            AppContext(settings.app_name, settings.app_version),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(use_json),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if file_path:
        handlers.append(logging.FileHandler(file_path, encoding="utf-8"))
    logging.basicConfig(format=_STDLIB_FORMAT, level=log_level, handlers=handlers, force=True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables that will be included in all subsequent logs.

    The conversation loop binds ``book_id`` and ``turn_id`` for the
    duration of a turn.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "SECRET_FIELDS",
    "REDACTED",
    "redact_secrets",
    "AppContext",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
