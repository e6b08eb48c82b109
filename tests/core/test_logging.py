"""
setup_logging - loguru sink configuration.
"""
import sys

import pytest
from loguru import logger

from chips_history.core.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_setup_logging_creates_log_dir(tmp_path):
    log_dir = tmp_path / "logs"

    setup_logging(debug_mode=True, log_dir=str(log_dir))
    logger.debug("history test message")
    logger.remove()

    files = list(log_dir.glob("history_*.log"))
    assert len(files) == 1
    content = files[0].read_text(encoding="utf-8")
    assert "Command history logging initialized." in content
    assert "history test message" in content


def test_setup_logging_console_only(tmp_path):
    setup_logging(debug_mode=False, log_dir=str(tmp_path / "unused"), to_file=False)

    assert not (tmp_path / "unused").exists()
