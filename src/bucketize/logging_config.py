"""
Logging configuration for bucketize.

Handlers attach to the `bucketize` logger, not the root logger, so an
embedding application's own logging setup is left untouched. Library modules
log through `logging.getLogger(__name__)` and inherit whatever is set here.

Records may carry bucket context via `extra` (`bucket_set`, `lower`, `upper`,
`output`); the JSON formatter emits those fields when present.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path

PACKAGE_LOGGER = "bucketize"
LOG_FILE = "bucketize.log"
LOG_DIR = Path(os.getenv("BUCKETIZE_LOG_DIR", "logs"))
CONTEXT_FIELDS = ("bucket_set", "lower", "upper", "output")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"


class ColoredFormatter(logging.Formatter):
    """Colored level names for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        # copy so other handlers still see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


class JSONFormatter(logging.Formatter):
    """One JSON object per line, including any bucket context fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def _level(name: str, default: int) -> int:
    return getattr(logging, name.upper(), default)


def setup_logging(
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    *,
    log_dir: Path | str | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Configure the `bucketize` logger hierarchy.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        console_level: stderr output level (DEBUG, INFO, WARNING, ERROR)
        file_level: level for `bucketize.log`
        log_dir: directory for the log file, defaults to LOG_DIR
        json_format: write the file log as JSON lines

    Returns:
        The configured package logger.
    """
    directory = Path(log_dir) if log_dir is not None else LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    console_lvl = _level(console_level, logging.WARNING)
    file_lvl = _level(file_level, logging.DEBUG)

    logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_handlers(logger)
    logger.setLevel(min(console_lvl, file_lvl))
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_lvl)
    if os.getenv("BUCKETIZE_NO_COLOR"):
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    else:
        console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(console_handler)

    file_handler = logging.handlers.TimedRotatingFileHandler(
        directory / LOG_FILE,
        when="midnight",
        backupCount=30,
        encoding="utf-8",
    )
    file_handler.setLevel(file_lvl)
    file_handler.suffix = "%Y-%m-%d"
    if json_format:
        file_handler.setFormatter(JSONFormatter())
    else:
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(file_handler)

    logger.debug(f"Logging configured (console={console_level}, file={file_level})")
    return logger


def reset_logging() -> None:
    """Remove handlers installed by `setup_logging` and propagate to root again."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_handlers(logger)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def _remove_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
