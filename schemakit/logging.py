"""Structured logging for schemakit.

structlog on top of the stdlib ``logging`` module. Library loggers live
under the ``schemakit`` namespace; ``configure_logging`` installs one handler
on that namespace and leaves the root logger to the application.

Library loggers wrap stdlib loggers with their own processor chain, so
structlog's global configuration belongs to the application. Until
``configure_logging`` runs, events follow the stdlib hierarchy: the
namespace carries a NullHandler and records below the effective level are
dropped before rendering.

Development output is colored console text, production output is one JSON
object per line. Bound contextvars are merged into every event and values
under sensitive keys are redacted before rendering.
"""
import logging
import sys
from typing import IO, Any

import structlog
from structlog.types import EventDict, Processor

from . import __version__
from .config import get_settings

LOGGER_NAMESPACE = "schemakit"
REDACTED = "[REDACTED]"
SENSITIVE_KEYS = frozenset({"password", "token", "secret", "authorization", "cookie", "value", "input"})
_MAX_REDACT_DEPTH = 5

logging.getLogger(LOGGER_NAMESPACE).addHandler(logging.NullHandler())


def redact(obj: Any, depth: int = 0) -> Any:
    """Replace values stored under sensitive keys, descending into dicts and lists."""
    if depth > _MAX_REDACT_DEPTH:
        return obj
    match obj:
        case dict():
            return {
                key: REDACTED if isinstance(key, str) and key.lower() in SENSITIVE_KEYS
                else redact(item, depth + 1)
                for key, item in obj.items()
            }
        case list() | tuple():
            return [redact(item, depth + 1) for item in obj]
        case _:
            return obj


def _redact_event(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    return redact(event_dict)


def _add_library_info(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("library", LOGGER_NAMESPACE)
    event_dict.setdefault("library_version", __version__)
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors applied to structlog and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_library_info,
        _redact_event,
    ]


def _renderer(json_logs: bool, stream: IO[str]) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(
        colors=stream.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    level: str | None = None,
    json_logs: bool | None = None,
    *,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install one rendering handler on the ``schemakit`` logger namespace.

    The root logger and structlog's global configuration are left alone.

    Args:
        level: Log level name. Defaults to ``Settings.LOG_LEVEL``.
        json_logs: JSON lines when True, console text when False.
            Defaults to ``Settings.LOG_JSON``.
        stream: Output stream, stderr by default.

    Returns:
        The installed handler.
    """
    settings = get_settings()
    level = (level or settings.LOG_LEVEL).upper()
    json_logs = settings.LOG_JSON if json_logs is None else json_logs
    stream = stream or sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=get_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_logs, stream),
        ],
    ))

    library_logger = logging.getLogger(LOGGER_NAMESPACE)
    library_logger.handlers = [handler]
    library_logger.setLevel(getattr(logging, level, logging.INFO))
    library_logger.propagate = False
    return handler


def get_logger(name: str = LOGGER_NAMESPACE) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger wrapping the stdlib logger ``schemakit.<name>``."""
    if name != LOGGER_NAMESPACE and not name.startswith(f"{LOGGER_NAMESPACE}."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            *get_shared_processors(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def bind_context(**kwargs) -> None:
    """Bind key-value pairs to every event emitted from the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LoggerRegistry:
    """One shared logger per library area."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, area: str) -> structlog.stdlib.BoundLogger:
        if area not in cls._loggers:
            cls._loggers[area] = get_logger(area)
        return cls._loggers[area]


def engine_logger() -> structlog.stdlib.BoundLogger:
    """Parse outcomes."""
    return LoggerRegistry.get("engine")


def schema_logger() -> structlog.stdlib.BoundLogger:
    """Schema construction."""
    return LoggerRegistry.get("schema")
