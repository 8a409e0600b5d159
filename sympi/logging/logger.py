# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for sympi.

Every log entry is one JSON object per line: timestamped, leveled and
tagged with the logger name. A campaign can run for days, so the log has
to be something you can grep, tail and feed to jq, not prose.

How this works:
  - Python's standard `logging` module does the work. The only custom piece
    is JsonFormatter, which serializes each record into a single JSON line.
  - All loggers under the "sympi" namespace propagate to one package logger.
    That logger owns the handlers: stdout always, plus an optional log file.
    Reconfiguring it (new level, new file) therefore affects module loggers
    that were created at import time.
  - Loggers outside the namespace get their own handlers, same format.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "sympi.experiments.executor",
   "msg": "Running experiment", "host_version": "3.0.4", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER_NAME = "sympi"

# Attributes every LogRecord carries. Anything else came in through `extra`.
_STANDARD_ATTRS = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "relativeCreated",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "pathname",
    "filename",
    "module",
    "levelno",
    "levelname",
    "processName",
    "process",
    "threadName",
    "thread",
    "message",
    "msecs",
    "taskName",
})

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts    : ISO 8601 UTC timestamp
      level : log level name
      module: the logger name (usually the Python module path)
      msg   : the formatted message string

    Fields passed through `extra=` are merged in as-is, and a formatted
    traceback lands under "exc" when the call used exc_info.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class _StdoutHandler(logging.StreamHandler):
    """StreamHandler that always writes to the current sys.stdout."""

    @property
    def stream(self):  # type: ignore[override]
        return sys.stdout

    @stream.setter
    def stream(self, value) -> None:  # type: ignore[no-untyped-def]
        pass


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def _attach_handlers(logger: logging.Logger, level: int, log_file: Optional[Path]) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = JsonFormatter()

    stdout_handler = _StdoutHandler()
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(level)
    logger.propagate = False


def configure_logging(log_level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    (Re)configure the package logger that every sympi module logs through.

    Existing handlers are closed and replaced, so calling this twice with a
    different file moves the output instead of duplicating it.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stdout and the file.

    Returns:
        The configured package logger.
    """
    level = _resolve_log_level(log_level)
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    _attach_handlers(logger, level, log_file)
    return logger


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Get a structured JSON logger.

    This is the only sanctioned way to get a logger in sympi. Modules call it
    once at import time with just their __name__; the CLI passes a level (and
    maybe a file) to reconfigure output for the whole package.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: Optional level. When given, output is reconfigured.
        log_file: Optional path to a log file, also triggers reconfiguration.

    Returns:
        A logging.Logger that outputs structured JSON.
    """
    in_package = name == PACKAGE_LOGGER_NAME or name.startswith(PACKAGE_LOGGER_NAME + ".")

    if not in_package:
        logger = logging.getLogger(name)
        level = _resolve_log_level(log_level or "INFO")
        if not logger.handlers or log_file is not None:
            _attach_handlers(logger, level, log_file)
        else:
            logger.setLevel(level)
        return logger

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if log_level is not None or log_file is not None:
        configure_logging(log_level or "INFO", log_file)
    elif not package_logger.handlers:
        configure_logging()

    return logging.getLogger(name)
