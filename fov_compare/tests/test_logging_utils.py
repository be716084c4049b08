from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from fov_compare import logging_utils


@pytest.fixture
def package_logger():
    logger = logging.getLogger(logging_utils.LOGGER_NAME)
    saved = (logger.level, logger.propagate, list(logger.handlers))
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved[2]:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(saved[0])
    logger.propagate = saved[1]


def test_resolve_logs_dir_prefers_env(tmp_path, monkeypatch):
    target = tmp_path / "custom-logs"
    monkeypatch.setenv(logging_utils.LOG_DIR_ENV_VAR, str(target))
    assert logging_utils.resolve_logs_dir() == target
    assert target.is_dir()


def test_resolve_logs_dir_uses_xdg_state(tmp_path, monkeypatch):
    monkeypatch.delenv(logging_utils.LOG_DIR_ENV_VAR, raising=False)
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    assert logging_utils.resolve_logs_dir("fov-test") == tmp_path / "state" / "fov-test" / "logs"


def test_rotating_handler_retention(tmp_path):
    handler = logging_utils.build_rotating_file_handler(tmp_path, "x.log", retention=3, max_bytes=1024)
    try:
        assert isinstance(handler, RotatingFileHandler)
        assert handler.backupCount == 2
        assert handler.maxBytes == 1024
    finally:
        handler.close()


def test_resolve_log_level():
    assert logging_utils.resolve_log_level(True) == logging.DEBUG
    assert logging_utils.resolve_log_level(False) == logging.INFO


def test_configure_logging_replaces_file_handler(tmp_path, monkeypatch, package_logger):
    monkeypatch.delenv(logging_utils.PROPAGATE_ENV_VAR, raising=False)
    logging_utils.configure_logging(debug_enabled=True, retention=2, log_dir=tmp_path)
    logging_utils.configure_logging(debug_enabled=False, retention=2, log_dir=tmp_path)

    file_handlers = [h for h in package_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert package_logger.level == logging.INFO
    assert package_logger.propagate is False


def test_configure_logging_propagation_opt_in(tmp_path, monkeypatch, package_logger):
    monkeypatch.setenv(logging_utils.PROPAGATE_ENV_VAR, "1")
    logging_utils.configure_logging(debug_enabled=False, retention=1, log_dir=tmp_path)
    assert package_logger.propagate is True
