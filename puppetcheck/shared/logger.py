"""Structured JSON logging for puppetcheck components."""

import json
import logging
import sys
from datetime import datetime, timezone


class JsonFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record):
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "component": record.name.replace("puppetcheck.", ""),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if hasattr(record, "check_data"):
            entry["data"] = record.check_data
        return json.dumps(entry)


def get_check_logger(
    component: str,
    log_file: str | None = None,
    level: int | str = logging.WARNING,
) -> logging.Logger:
    """Return a named logger that emits structured JSON.

    Stdout belongs to the plugin result line, so records go to stderr
    unless a log file is given.

    Args:
        component: Short name for the component (e.g. "evaluator").
        log_file: Optional path; writes JSON lines to this file instead of stderr.
        level: Logging level, defaults to WARNING.

    Returns:
        A ``logging.Logger`` instance named ``puppetcheck.<component>``.
    """
    logger = logging.getLogger(f"puppetcheck.{component}")
    logger.setLevel(level)

    if not logger.handlers:
        if log_file:
            handler = logging.FileHandler(log_file)
        else:
            handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)

    return logger


def configure_check_loggers(level: int | str, log_file: str | None = None) -> None:
    """Apply a level, and optionally a log file, to every puppetcheck logger created so far."""
    for name, existing in logging.Logger.manager.loggerDict.items():
        if not name.startswith("puppetcheck.") or not isinstance(existing, logging.Logger):
            continue
        existing.setLevel(level)
        if log_file:
            for handler in list(existing.handlers):
                existing.removeHandler(handler)
                handler.close()
            handler = logging.FileHandler(log_file)
            handler.setFormatter(JsonFormatter())
            existing.addHandler(handler)
