import logging
from logging.handlers import RotatingFileHandler

import pytest

from blueprint_planner.utils.logging_config import LoggingConfig


@pytest.fixture
def logging_setup():
    yield LoggingConfig
    LoggingConfig.shutdown()


def test_setup_writes_to_named_rotating_file(logging_setup, tmp_path):
    log_path = logging_setup.setup_logging(tmp_path / "logs", log_file_name="session.log",
                                           console_level=logging.WARNING, max_bytes=1024)

    assert log_path == tmp_path / "logs" / "session.log"
    assert logging_setup.get_log_file_path() == log_path

    logging.getLogger("blueprint_planner.test").debug("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "hello from the test" in log_path.read_text(encoding="utf-8")

    rotating = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
    assert [h.maxBytes for h in rotating] == [1024]


def test_second_setup_keeps_first_file(logging_setup, tmp_path):
    first = logging_setup.setup_logging(tmp_path / "a")
    second = logging_setup.setup_logging(tmp_path / "b")

    assert second == first
    assert not (tmp_path / "b").exists()


def test_shutdown_removes_handlers(logging_setup, tmp_path):
    root = logging.getLogger()
    before = list(root.handlers)
    logging_setup.setup_logging(tmp_path)
    logging_setup.shutdown()

    assert root.handlers == before
    assert logging_setup.get_log_file_path() is None
