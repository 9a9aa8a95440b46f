"""Structured logging and audit events."""

import inspect
import logging
import os
import sys
from contextlib import suppress
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict

LOG_FILE_NAME = "env-guard.log"

SENSITIVE_KEYS = {
    "password",
    "token",
    "secret",
    "key",
    "credential",
    "api_key",
    "value",
    "plaintext",
}

# Marks handlers installed by setup_logging so a later call can replace them
_HANDLER_ATTR = "_env_guard_handler"


def add_timestamp(
    _: logging.Logger, __: str, event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 timestamp."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def add_log_level(
    _: logging.Logger,
    level_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add log level name to event dictionary.

    Args:
        _: The wrapped logger (unused)
        level_name: The name of the log level
        event_dict: The event dictionary to modify

    Returns:
        Modified event dictionary with log level added
    """
    event_dict["level"] = level_name
    return event_dict


def sanitize_keys(
    event_dict: dict[str, Any], sensitive_keys: set[str]
) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive keys, \
   using case-insensitive matching and handling nested structures.

    Args:
        event_dict: Dictionary to sanitize
        sensitive_keys: Set of keys to redact

    Returns:
        Sanitized copy of the dictionary
    """

    def _sanitize_value(key: str, value: Any) -> Any:
        if any(sk.lower() == key.lower() for sk in sensitive_keys):
            return "***"
        if isinstance(value, dict):
            return sanitize_keys(value, sensitive_keys)
        if isinstance(value, list):
            return [_sanitize_value("", item) for item in value]
        return value

    return {k: _sanitize_value(k, v) for k, v in event_dict.items()}


def sanitize_event_dict(
    _: logging.Logger, __: str, event_dict: EventDict
) -> dict[str, Any]:
    """Sanitize log record keys and values, recursively masking sensitive data."""
    return sanitize_keys(dict(event_dict), SENSITIVE_KEYS)


PROCESSORS = [
    structlog.stdlib.filter_by_level,
    add_log_level,
    add_timestamp,
    sanitize_event_dict,
    structlog.processors.format_exc_info,
    structlog.processors.JSONRenderer(),
]


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger backed by the stdlib logger ``name``.

    The logger carries its own processor chain, so the global structlog
    configuration of a host application is left alone. Output goes wherever
    the stdlib logging tree sends it.

    Args:
        name: Logger name, usually ``__name__``.

    Returns:
        A bound structlog logger.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def get_log_dir(base_dir: str | Path) -> Path:
    """Get normalized log directory path."""
    return Path(base_dir).resolve()


def create_secure_handler(
    log_path: Path, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    """Create a RotatingFileHandler with restrictive permissions.

    Args:
        log_path: Path to the log file
        max_bytes: Maximum size of each log file
        backup_count: Number of backup files to keep

    Returns:
        Configured RotatingFileHandler instance
    """
    os.makedirs(log_path.parent, mode=0o750, exist_ok=True)

    if not log_path.exists():
        log_path.touch(mode=0o640)
    os.chmod(log_path, 0o640)

    return RotatingFileHandler(
        str(log_path), maxBytes=max_bytes, backupCount=backup_count
    )


def setup_logging(
    *,
    log_level: str = "WARNING",
    base_dir: str | Path | None = None,
    max_log_size: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> list[logging.Handler]:
    """Install env-guard handlers on the root logger.

    Handlers from a previous call are removed first, handlers installed by
    anyone else are kept.

    Args:
        log_level: Root log level name.
        base_dir: Directory for a rotating log file. No file is written when None.
        max_log_size: Maximum size of the log file before rotation.
        backup_count: Number of rotated files to keep.

    Returns:
        The handlers that were installed.
    """
    reset_logging()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    handlers: list[logging.Handler] = [console_handler]

    if base_dir is not None:
        log_file = get_log_dir(base_dir) / LOG_FILE_NAME
        file_handler = create_secure_handler(log_file, max_log_size, backup_count)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _HANDLER_ATTR, True)
        root_logger.addHandler(handler)

    return handlers


def reset_logging() -> None:
    """Remove the handlers installed by :func:`setup_logging`."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if getattr(handler, _HANDLER_ATTR, False):
            with suppress(Exception):
                handler.close()
            root_logger.removeHandler(handler)


def audit_event(
    *,
    event_type: str,
    project: str,
    success: bool,
    details: dict[str, Any] | None = None,
    error: Exception | None = None,
) -> None:
    """Log an audit event.

    Args:
        event_type: Type of event (e.g., "secret.set")
        project: Project root the event applies to
        success: Whether the operation succeeded
        details: Optional event details
        error: Optional exception if operation failed
    """
    logger = get_logger("env_guard.audit")

    event: dict[str, Any] = {
        "event_type": getattr(event_type, "value", event_type),
        "project": project,
        "success": success,
    }

    frame = inspect.currentframe()
    if frame is not None and frame.f_back is not None:
        event["caller"] = {
            "file": frame.f_back.f_code.co_filename,
            "line": frame.f_back.f_lineno,
            "function": frame.f_back.f_code.co_name,
        }

    if details:
        event["details"] = sanitize_keys(details, SENSITIVE_KEYS)

    if error is not None:
        event["error"] = {
            "type": type(error).__name__,
            "message": str(error),
        }

    if success:
        logger.info("audit_event", **event)
    else:
        logger.error("audit_event", **event)
