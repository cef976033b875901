"""Logging setup shared by the engine, reports and scripts.

Two output formats are supported: a human readable line format for
terminals and a JSON-per-line format for log collectors. Records logged
with ``extra={"credit_id": ...}`` (or ``client_id`` / ``cobrador_id``)
carry those identifiers as top-level JSON fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from cobranza.exceptions import ConfigurationError

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("confluent_kafka", "psycopg")
CONTEXT_FIELDS = ("credit_id", "client_id", "cobrador_id")


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: TextIO | None = None,
) -> None:
    """Install a single root handler.

    Parameters
    ----------
    level : str
        Level name, case-insensitive. Unknown names mean INFO.
    format_type : str
        "standard" or "json".
    stream : TextIO | None
        Destination stream (default: stdout).

    Raises
    ------
    ConfigurationError
        If format_type is not a known format.
    """
    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    elif format_type == "standard":
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt=DATE_FORMAT)
    else:
        raise ConfigurationError(f"Unknown log format {format_type!r}, expected 'standard' or 'json'")

    log_level = _resolve_level(level)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)
    logging.getLogger("cobranza").setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        # extra={"extra": {...}} merges arbitrary fields
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)
