"""Logging utilities for the model registry.

This module provides standardized logging functionality for cache, registry
and fetch operations. All loggers live under the ``chutes_model_registry``
namespace so host applications can configure them in one place.
"""

import logging
from enum import Enum
from typing import Any, Optional, Union

ROOT_LOGGER_NAME = "chutes_model_registry"

# Library code must stay silent unless the host configures logging
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


class LogLevel(int, Enum):
    """Log levels for the registry."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogEvent(str, Enum):
    """Event types for registry logging."""

    MODEL_CACHE = "model_cache"
    MODEL_REGISTRY = "model_registry"
    MODEL_FETCH = "model_fetch"
    CONFIG = "config"
    AUTH = "auth"
    PLUGIN = "plugin"
    INSTALL = "install"


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the package namespace.

    Args:
        name: Module name (``__name__``) or a short suffix such as ``"fetcher"``

    Returns:
        Logger named ``chutes_model_registry.<suffix>``
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


_logger = get_logger("events")


def _log(level: LogLevel, event: LogEvent, message: str, **data: Any) -> None:
    """Log an event with structured data attached as ``extra``.

    Args:
        level: Severity level
        event: Event type
        message: Human readable message
        **data: Event data
    """
    if not _logger.isEnabledFor(level):
        return
    suffix = ""
    if data:
        suffix = " " + " ".join(f"{key}={value!r}" for key, value in sorted(data.items()))
    _logger.log(level, f"[{event.value}] {message}{suffix}", extra={"event": event.value, "event_data": data})


def log_debug(event: LogEvent, message: str, **data: Any) -> None:
    """Log a debug event."""
    _log(LogLevel.DEBUG, event, message, **data)


def log_info(event: LogEvent, message: str, **data: Any) -> None:
    """Log an info event."""
    _log(LogLevel.INFO, event, message, **data)


def log_warning(event: LogEvent, message: str, **data: Any) -> None:
    """Log a warning event."""
    _log(LogLevel.WARNING, event, message, **data)


def log_error(event: LogEvent, message: str, **data: Any) -> None:
    """Log an error event."""
    _log(LogLevel.ERROR, event, message, **data)


def configure_logging(level: Union[int, str] = logging.WARNING, handler: Optional[logging.Handler] = None) -> None:
    """Attach a stream handler to the package logger and set its level.

    Used by the CLI; library users normally configure logging themselves.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or numeric level
        handler: Handler to attach (defaults to a stderr ``StreamHandler``)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    if handler is None:
        # Replace rather than stack handlers when the CLI group is invoked repeatedly
        for existing in list(root.handlers):
            if getattr(existing, "_chutes_cli_handler", False):
                root.removeHandler(existing)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        setattr(handler, "_chutes_cli_handler", True)

    handler.setLevel(level)
    root.addHandler(handler)
