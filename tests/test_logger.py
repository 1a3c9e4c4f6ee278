# tests/test_logger.py

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from taskboard.config import Settings
from taskboard.utils.logger import setup_logging


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_writes_rotating_file(tmp_path: Path, restore_root_logger) -> None:
    settings = Settings(_env_file=None, LOGS_DIR=tmp_path / "logs", LOG_LEVEL="warning", DEBUG=False)

    root = setup_logging(settings)
    logging.getLogger("taskboard.test").warning("disk is full")
    for handler in root.handlers:
        handler.flush()

    assert root.level == logging.WARNING
    assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)
    assert "disk is full" in (tmp_path / "logs" / "taskboard.log").read_text(encoding="utf-8")
    assert logging.getLogger("uvicorn.access").level == logging.WARNING


def test_setup_logging_console_only(tmp_path: Path, restore_root_logger) -> None:
    settings = Settings(_env_file=None, LOGS_DIR=tmp_path / "logs", LOG_TO_FILE=False)

    root = setup_logging(settings)

    assert len(root.handlers) == 1
    assert not (tmp_path / "logs").exists()
