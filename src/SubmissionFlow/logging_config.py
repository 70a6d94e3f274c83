# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.logging_config",
#   "purpose": "Structured logging setup for services embedding the submission flow tools",
#   "sections": [
#     {"id": "mask-sensitive-data", "name": "mask_sensitive_data", "anchor": "function-mask-sensitive-data", "kind": "function"},
#     {"id": "jsonformatter", "name": "JSONFormatter", "anchor": "class-jsonformatter", "kind": "class"},
#     {"id": "setup-logging", "name": "setup_logging", "anchor": "function-setup-logging", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""
Structured Logging Utilities

Modules in this package log through ``logging.getLogger(__name__)`` and never
install handlers themselves. Services call :func:`setup_logging` once at
startup to get a console handler and, when a log directory is configured, a
rotating JSON-lines file whose records carry the ``stage`` and ``entity``
context the entity managers attach via ``extra``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

from .settings import StoreSettings

__all__ = ["JSONFormatter", "mask_sensitive_data", "setup_logging"]

LOGGER_NAME = "SubmissionFlow"
_MAX_LOG_BYTES = 50 * 1024 * 1024
_CONTEXT_FIELDS = ("stage", "entity", "graph", "status", "sparql_endpoint")


def mask_sensitive_data(payload: Dict[str, object]) -> Dict[str, object]:
    """Remove secrets from structured payloads prior to logging.

    Args:
        payload: Arbitrary key-value pairs that may contain store credentials.

    Returns:
        Copy of the payload where common secret fields are replaced with
        `***masked***`.

    Examples:
        >>> mask_sensitive_data({"password": "secret", "status": "ok"})
        {'password': '***masked***', 'status': 'ok'}
    """
    sensitive_keys = {"authorization", "api_key", "password", "token", "secret"}
    masked: Dict[str, object] = {}
    for key, value in payload.items():
        if key.lower() in sensitive_keys:
            masked[key] = "***masked***"
        else:
            masked[key] = value
    return masked


class JSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        """Serialize a logging record into a JSON line.

        Args:
            record: Log record emitted by the entity managers.

        Returns:
            JSON string with the known context fields and any ``extra_fields``
            mapping passed via ``extra``, with secrets masked.
        """
        now = datetime.now(timezone.utc)
        log_obj: Dict[str, object] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_obj[field] = str(value)
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_obj.update(extra_fields)
        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(mask_sensitive_data(log_obj), default=str)


def setup_logging(settings: StoreSettings, log_dir: Optional[Path] = None) -> logging.Logger:
    """Configure console and optional JSONL handlers for the package logger.

    Calling this repeatedly replaces the handlers it installed earlier instead
    of stacking duplicates.

    Args:
        settings: Settings providing ``log_level`` and ``log_dir``.
        log_dir: Optional directory override for the JSONL file.

    Returns:
        The configured ``SubmissionFlow`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_submission_flow_managed", False):
            logger.removeHandler(handler)
            handler.close()

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    stream_handler._submission_flow_managed = True  # type: ignore[attr-defined]
    logger.addHandler(stream_handler)

    log_dir = log_dir or settings.log_dir
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        today = datetime.now(timezone.utc).strftime("%Y%m%d")
        file_handler = RotatingFileHandler(
            log_dir / f"submission-flow-{today}.jsonl",
            maxBytes=_MAX_LOG_BYTES,
            backupCount=5,
        )
        file_handler.setFormatter(JSONFormatter())
        file_handler._submission_flow_managed = True  # type: ignore[attr-defined]
        logger.addHandler(file_handler)

    logger.propagate = True
    return logger
