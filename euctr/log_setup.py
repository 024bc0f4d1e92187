# euctr/log_setup.py
"""
Centralized logging configuration for the EU CTR scraper.

Provides:
- Colored console output for different log levels
- Optional file logging with rotation
- A context manager for timing per-jurisdiction operations

Usage:
    from euctr.log_setup import get_logger, LogContext

    logger = get_logger(__name__)
    logger.info("Crawl started")

    with LogContext(logger, "jurisdiction de"):
        # ... crawl + write ...
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Generator, Optional, Union

ROOT_LOGGER_NAME = "euctr"
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

# ANSI color codes for console output
COLORS = {
    "DEBUG": "\033[36m",     # Cyan
    "INFO": "\033[32m",      # Green
    "WARNING": "\033[33m",   # Yellow
    "ERROR": "\033[31m",     # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
    "DIM": "\033[2m",
}


class ColoredFormatter(logging.Formatter):
    """Formatter that adds ANSI colors to console output on a TTY."""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
    ) -> None:
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors:
            # Work on a copy so file handlers don't see escape codes
            record = logging.makeLogRecord(record.__dict__)
            level_color = COLORS.get(record.levelname, COLORS["RESET"])
            record.levelname = f"{level_color}{record.levelname}{COLORS['RESET']}"
            record.name = f"{COLORS['DIM']}{record.name}{COLORS['RESET']}"
        return super().format(record)


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(
    log_level: Union[int, str] = DEFAULT_LOG_LEVEL,
    log_dir: Optional[Union[str, Path]] = None,
    run_id: Optional[str] = None,
    enable_console_logging: bool = True,
) -> Optional[Path]:
    """
    Configure the ``euctr`` logger hierarchy.

    Should be called once at application startup. Calling it again replaces
    the previously installed handlers.

    Args:
        log_level: Minimum level, as a ``logging`` constant or its name.
        log_dir: Directory for rotating log files. No file logging when None.
        run_id: Identifier used in the log file name (defaults to a timestamp).
        enable_console_logging: Whether to log to stderr.

    Returns:
        Path of the log file, or None when file logging is disabled.
    """
    level = _coerce_level(log_level)
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    if enable_console_logging:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(ColoredFormatter(
            fmt="%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt=DEFAULT_DATE_FORMAT,
        ))
        root_logger.addHandler(console_handler)

    log_file = None
    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        run_id = run_id or datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"euctr_{run_id}.log"
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            fmt=DEFAULT_FORMAT,
            datefmt=DEFAULT_DATE_FORMAT,
        ))
        root_logger.addHandler(file_handler)

    return log_file


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the ``euctr`` namespace.

    Args:
        name: Module name, typically __name__.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


@contextmanager
def LogContext(
    logger: logging.Logger,
    operation: str,
    level: int = logging.INFO,
) -> Generator[None, None, None]:
    """
    Log start/end of an operation with timing.

    Example:
        >>> with LogContext(logger, "jurisdiction de"):
        ...     crawl("de", 3, client)
        INFO | Starting: jurisdiction de
        INFO | Completed: jurisdiction de (2.34s)
    """
    start_time = time.perf_counter()
    logger.log(level, f"Starting: {operation}")
    try:
        yield
    except Exception as e:
        elapsed = time.perf_counter() - start_time
        logger.error(f"Failed: {operation} ({elapsed:.2f}s) - {type(e).__name__}: {e}")
        raise
    else:
        elapsed = time.perf_counter() - start_time
        logger.log(level, f"Completed: {operation} ({elapsed:.2f}s)")
