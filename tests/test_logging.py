"""Tests for logging setup."""

import logging
from pathlib import Path

from paim.core.logging import get_logger, setup_logging


def test_child_logger_name():
    assert get_logger("memory.engine").name == "paim.memory.engine"


def test_setup_logging_writes_file(tmp_path: Path):
    log_file = tmp_path / "logs" / "paim.log"
    logger = setup_logging(level=logging.DEBUG, log_file=log_file)
    get_logger("test").debug("hello from test")
    for handler in logger.handlers:
        handler.flush()

    assert "hello from test" in log_file.read_text(encoding="utf-8")


def test_setup_logging_is_repeatable(tmp_path: Path):
    setup_logging(log_file=tmp_path / "a.log")
    logger = setup_logging(log_file=tmp_path / "b.log")
    assert len(logger.handlers) == 2
