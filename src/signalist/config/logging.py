"""Structured logging for Signalist, built on structlog."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, List, Optional

import structlog
from structlog.types import EventDict, Processor

# Keys whose values never reach a log sink
SECRET_KEYS = frozenset({"token", "api_key", "password", "smtp_password", "authorization"})

_SIZE_UNITS = {"KB": 1024, "MB": 1024**2, "GB": 1024**3}


def redact_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask provider tokens and SMTP credentials passed as log context."""
    for key in SECRET_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = "***"
    return event_dict


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(format_type: str, file_enabled: bool) -> Processor:
    if format_type == "plain":
        return structlog.dev.ConsoleRenderer(colors=True)
    # Log files are parsed by machines; a console-only run stays readable
    if file_enabled:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(
    level: str = "INFO",
    format_type: str = "structured",
    file_enabled: bool = True,
    file_path: str = "data/signalist.log",
    max_file_size: str = "10MB",
    backup_count: int = 5,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'structured' (JSON to files) or 'plain' (colored console)
        file_enabled: Also write to a rotating log file
        file_path: Path of the log file
        max_file_size: Rotation size such as '10MB'
        backup_count: Rotated files to keep
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    # Scheduler and HTTP client chatter stays at WARNING unless debugging
    for noisy in ("apscheduler", "aiohttp.access"):
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=_shared_processors() + [_renderer(format_type, file_enabled)],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if file_enabled:
        logging.getLogger().addHandler(
            _rotating_file_handler(file_path, max_file_size, backup_count, log_level)
        )


def _rotating_file_handler(
    file_path: str, max_file_size: str, backup_count: int, log_level: int
) -> logging.Handler:
    log_file = Path(file_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=parse_file_size(max_file_size),
        backupCount=backup_count,
    )
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def parse_file_size(size: str) -> int:
    """Parse '512KB', '10MB' or a plain byte count."""
    size = size.strip().upper()
    for unit, factor in _SIZE_UNITS.items():
        if size.endswith(unit):
            return int(size[: -len(unit)]) * factor
    return int(size)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, usually named after the calling module."""
    return structlog.get_logger(name)


class LoggerMixin:
    """Gives a class a ``logger`` named after it."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(self.__class__.__name__)


def log_audit_event(event: str, user_id: Optional[str] = None, **context: Any) -> None:
    """
    Record an account-level event such as a registration.

    Args:
        event: Short event name, e.g. 'user_registered'
        user_id: Identifier of the affected user
        **context: Additional context
    """
    get_logger("audit").info("Audit event", audit_event=event, user_id=user_id, **context)
