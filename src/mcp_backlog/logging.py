"""Structured JSON logging for mcp-backlog.

Writes JSONL to stderr (stdout carries the MCP stdio stream) and, when a log
file is configured, to a rotating file as well (5MB, 3 backups).
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, TextIO

LOGGER_NAME = "mcp_backlog"
_setup_lock = threading.Lock()
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "tool"):
            entry["tool"] = record.tool
        if hasattr(record, "args_data"):
            entry["args"] = record.args_data
        if hasattr(record, "duration_ms"):
            entry["duration_ms"] = record.duration_ms
        if hasattr(record, "error"):
            entry["error"] = record.error
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


class _StderrHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Marker subclass so repeated setup can find its own stream handler."""


def setup_logging(
    log_file: Path | None = None,
    *,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach JSON handlers to the ``mcp_backlog`` logger.

    Idempotent: a second call reuses the existing stderr handler and swaps the
    file handler only if *log_file* points somewhere else.
    """
    logger = logging.getLogger(LOGGER_NAME)

    with _setup_lock:
        if not any(isinstance(h, _StderrHandler) for h in logger.handlers):
            stderr_handler = _StderrHandler(stream or sys.stderr)
            stderr_handler.setFormatter(_JsonFormatter())
            logger.addHandler(stderr_handler)

        if log_file is not None:
            target_filename = os.path.abspath(str(log_file))
            existing = None
            for h in logger.handlers[:]:
                if not isinstance(h, RotatingFileHandler):
                    continue
                if h.baseFilename == target_filename:
                    existing = h
                    continue
                # Different path: drop the stale handler.
                logger.removeHandler(h)
                h.close()
            if existing is None:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = RotatingFileHandler(
                    str(log_file),
                    maxBytes=_MAX_BYTES,
                    backupCount=_BACKUP_COUNT,
                )
                file_handler.setFormatter(_JsonFormatter())
                logger.addHandler(file_handler)

        logger.setLevel(level)
    return logger
