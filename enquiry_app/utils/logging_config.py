"""
Application logging setup.

Console and rotating-file handlers are attached to ``app.logger`` according to
the monitoring config (``LOG_LEVEL``, ``LOG_FORMAT``, ``LOG_DIR`` and friends).
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from flask import current_app, has_app_context
from flask.logging import default_handler

_HANDLER_MARKER = "_enquiry_app_handler"
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}
TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line, carrying any ``extra=`` attributes."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _build_formatter(log_format: str) -> logging.Formatter:
    if str(log_format).lower() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(app) -> logging.Logger:
    """Attach handlers to ``app.logger``; safe to call repeatedly."""
    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    formatter = _build_formatter(app.config.get("LOG_FORMAT", "text"))

    logger = app.logger
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)

    if app.config.get("ENABLE_CONSOLE_LOGGING", True):
        logger.removeHandler(default_handler)
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(formatter)
        setattr(console, _HANDLER_MARKER, True)
        logger.addHandler(console)

    if app.config.get("ENABLE_FILE_LOGGING", False):
        log_dir = app.config.get("LOG_DIR", "logs")
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "enquiry_app.log"),
            maxBytes=int(app.config.get("LOG_FILE_MAX_BYTES", 10485760)),
            backupCount=int(app.config.get("LOG_FILE_BACKUP_COUNT", 10)),
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_MARKER, True)
        logger.addHandler(file_handler)

    logger.info("Logging configured (level=%s, format=%s)", level_name, app.config.get("LOG_FORMAT", "text"))
    return logger


def get_logger(name: str = "enquiry_app") -> logging.Logger:
    """Return the Flask app logger inside an app context, else a module logger."""
    if has_app_context():
        return current_app.logger
    return logging.getLogger(name)
