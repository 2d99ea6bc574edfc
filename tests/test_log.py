"""Tests for the loguru setup."""

from __future__ import annotations

import logging
from pathlib import Path

from loguru import logger

from browser_contexts.log import setup_logging


def test_log_file_receives_debug_records(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "browser-contexts.log"

    setup_logging("WARNING", log_file)
    logger.debug("opening {}", "acme")
    logger.remove()

    text = log_file.read_text(encoding="utf-8")
    assert "opening acme" in text
    assert "DEBUG" in text


def test_stdlib_logging_is_intercepted(tmp_path: Path) -> None:
    log_file = tmp_path / "bc.log"

    setup_logging("WARNING", log_file)
    logging.getLogger("some.library").warning("from stdlib")
    logger.remove()

    assert "from stdlib" in log_file.read_text(encoding="utf-8")
