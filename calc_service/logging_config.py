"""Structured logging setup shared by the whole service."""

import logging
import sys
from pathlib import Path

import structlog

from .config import Settings

LOG_FORMAT = "%(message)s"


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging(settings: Settings) -> None:
    """Route structlog through stdlib logging with JSON output.

    Records always go to stdout. When ``LOG_DIR`` is set, every record is
    also appended to ``combined.log`` and errors to ``error.log`` inside it.

    Args:
        settings: Application settings providing level and log directory.
    """
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    handlers: list[logging.Handler] = [console]

    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_file_handler(log_dir / "error.log", logging.ERROR))
        handlers.append(_file_handler(log_dir / "combined.log", logging.NOTSET))

    logging.basicConfig(level=level, handlers=handlers, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Loggers stay lazy so structlog.testing.capture_logs can intercept them.
        cache_logger_on_first_use=False,
    )
