"""Structured logging for LingoTales.

All loggers live under the "lingotales" namespace and share one stderr
handler installed on that parent logger. Records are JSON lines unless
LINGOTALES_LOG_FORMAT=text; LINGOTALES_LOG_LEVEL sets verbosity.
"""
import json
import logging
import os
import sys
from typing import Any

ROOT_LOGGER = "lingotales"

# Keys accepted through `extra=`; anything else is dropped from the output.
EXTRA_KEYS = (
    "component", "endpoint", "status_code", "duration_ms", "count",
    "detail", "ip", "provider", "model", "strategy",
)


def _extras(record: logging.LogRecord) -> dict:
    return {k: getattr(record, k) for k in EXTRA_KEYS if getattr(record, k, None) is not None}


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
            **_extras(record),
        }
        exc = record.exc_info[1] if record.exc_info else None
        if exc is not None:
            entry["error"] = str(exc)
            entry["error_type"] = type(exc).__name__
        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines with the extras appended as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root
    level = os.environ.get("LINGOTALES_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level, logging.INFO))
    handler = logging.StreamHandler(sys.stderr)
    if os.environ.get("LINGOTALES_LOG_FORMAT", "json") == "text":
        handler.setFormatter(TextFormatter())
    else:
        handler.setFormatter(JSONFormatter())
    root.addHandler(handler)
    root.propagate = False
    return root


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return a logger under the lingotales namespace.

        logger = get_logger("lingotales.db")
        logger.info("Deck created", extra={"component": "db", "count": 1})
    """
    root = _configure_root()
    if name == ROOT_LOGGER:
        return root
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
