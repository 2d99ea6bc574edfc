"""Logging configuration using loguru.

Command output goes through ``click.echo``; loguru carries diagnostics on
stderr.  At the default ``WARNING`` level a diagnostic is a single
``WARNING: ...`` line, so it reads like the rest of the CLI output.  With
``-v`` (``DEBUG``) each line gains a timestamp and the call site.

Optionally every record is also appended to a log file
(``BROWSER_CONTEXTS_LOG_FILE``), always at ``DEBUG``, which is useful for
investigating stale-lock cleanup or sync runs after the fact.

Stdlib ``logging`` is intercepted so that anything routed through it ends
up in the same sinks.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from loguru import logger

_TERSE_FORMAT = "<level>{level}</level>: {message}"
_DETAILED_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


class _InterceptHandler(logging.Handler):
    """Bridge stdlib logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk the call stack so loguru reports the real call-site
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> None:
    """Configure loguru as the sole logging sink.

    Call this once per CLI invocation, before any command runs.
    """
    level = level.upper()
    detailed = logger.level(level).no <= logger.level("DEBUG").no

    logger.remove()
    logger.add(sys.stderr, level=level, format=_DETAILED_FORMAT if detailed else _TERSE_FORMAT)
    if log_file is not None:
        logger.add(log_file, level="DEBUG", format=_FILE_FORMAT, rotation="1 MB", retention=3, encoding="utf-8")

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    logger.debug("Logging initialised (level={}, file={})", level, log_file)
