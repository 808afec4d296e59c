"""Logging helpers for the export services.

Every service module logs through a logger under `bar_archive.services` and
reports notable events as "{operation}: {outcome}" with the identifiers
involved attached to the record, so a structured handler can index them.

Usage:
    from bar_archive.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)
    log_operation(logger, "export_bar", "started", bar_id=1)
"""

import logging
from typing import Any

SERVICE_LOGGER_PREFIX = "bar_archive.services"

# Attribute names LogRecord already defines; `extra` may not overwrite them
_RESERVED_RECORD_KEYS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def get_service_logger(name: str) -> logging.Logger:
    """
    Logger for a service module.

    Args:
        name: Module name, usually __name__; only the last dotted part is kept

    Example:
        >>> get_service_logger("bar_archive.services.archive_writer").name
        'bar_archive.services.archive_writer'
    """
    return logging.getLogger(f"{SERVICE_LOGGER_PREFIX}.{name.rsplit('.', 1)[-1]}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log one step of a service operation.

    Context keys that clash with LogRecord attributes (e.g. "filename") are
    stored with a "ctx_" prefix instead.

    Args:
        logger: Service logger
        operation: What was attempted ("export_bar", "resolve_media")
        outcome: What happened ("started", "success", "media_missing", "aborted")
        level: Log level (default: INFO)
        **context: Identifiers for the record (bar_id, file_path, error...)
    """
    extra = {"operation": operation, "outcome": outcome}
    for key, value in context.items():
        extra[f"ctx_{key}" if key in _RESERVED_RECORD_KEYS else key] = value
    logger.log(level, "%s: %s", operation, outcome, extra=extra)
