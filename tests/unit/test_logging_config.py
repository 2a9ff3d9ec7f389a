from __future__ import annotations

import logging
from pathlib import Path
from queue import SimpleQueue

import pytest

from shared import logging_config


def _flush_managed_handlers() -> None:
    for handler in logging.getLogger().handlers:
        if getattr(handler, logging_config._HANDLER_TAG, False):  # type: ignore[attr-defined]
            handler.flush()


@pytest.fixture(autouse=True)
def reset_logging():
    logging_config._reset_for_tests()
    try:
        yield
    finally:
        logging_config._reset_for_tests()


def test_logging_creates_file_and_records_info(tmp_path, monkeypatch):
    monkeypatch.setenv("ESLAUNCHER_LOG_DIR", str(tmp_path))

    log_path = logging_config.ensure_app_logging()
    assert log_path == tmp_path / "launcher.log"
    assert logging_config.get_file_log_verbosity() == logging_config.LogVerbosity.INFO
    logging.getLogger("services.launcher.process").debug("debug message")
    logging.getLogger("services.launcher.process").info("Game exited with exit status: 0")
    _flush_managed_handlers()

    contents = log_path.read_text(encoding="utf-8")
    assert "debug message" not in contents
    assert "Game exited with exit status: 0" in contents


def test_log_file_variable_wins_over_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("ESLAUNCHER_LOG_DIR", str(tmp_path / "ignored"))
    monkeypatch.setenv("ESLAUNCHER_LOG_FILE", str(tmp_path / "custom" / "es.log"))

    log_path = logging_config.ensure_app_logging()

    assert log_path == tmp_path / "custom" / "es.log"
    assert log_path.parent.is_dir()


def test_logging_configuration_is_idempotent(tmp_path, monkeypatch):
    monkeypatch.setenv("ESLAUNCHER_LOG_DIR", str(tmp_path))

    first_path = logging_config.ensure_app_logging()
    second_path = logging_config.ensure_app_logging()

    assert first_path == second_path
    managed_handlers = [
        handler
        for handler in logging.getLogger().handlers
        if getattr(handler, logging_config._HANDLER_TAG, False)  # type: ignore[attr-defined]
    ]

    # Only the file handler should be installed during tests (stderr is not a tty).
    assert len(managed_handlers) == 1
    assert isinstance(managed_handlers[0], logging.FileHandler)
    assert Path(managed_handlers[0].baseFilename) == first_path


def test_can_adjust_file_log_verbosity(tmp_path, monkeypatch):
    monkeypatch.setenv("ESLAUNCHER_LOG_DIR", str(tmp_path))

    log_path = logging_config.ensure_app_logging()
    logging_config.set_file_log_verbosity("verbose")
    logging.getLogger("tests.logging").debug("debug message")
    _flush_managed_handlers()

    assert "debug message" in log_path.read_text(encoding="utf-8")
    assert logging_config.get_file_log_verbosity() == logging_config.LogVerbosity.VERBOSE


def test_unknown_verbosity_is_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("ESLAUNCHER_LOG_DIR", str(tmp_path))

    with pytest.raises(ValueError):
        logging_config.set_file_log_verbosity("chatty")


def test_disabling_file_logging_suppresses_output(tmp_path, monkeypatch):
    monkeypatch.setenv("ESLAUNCHER_LOG_DIR", str(tmp_path))

    log_path = logging_config.ensure_app_logging()
    logging_config.set_file_log_verbosity(logging_config.LogVerbosity.DISABLED)
    _flush_managed_handlers()
    initial_size = log_path.stat().st_size

    logging.getLogger("tests.logging").critical("critical message")
    _flush_managed_handlers()

    assert log_path.stat().st_size == initial_size


def test_log_channel_receives_lines_until_detached():
    sink: SimpleQueue[str] = SimpleQueue()
    logger = logging.getLogger("tests.logging.channel")
    logger.setLevel(logging.DEBUG)

    handler = logging_config.attach_log_channel(sink)
    logger.debug("too quiet")
    logger.warning("Failed to open path: no file browser available")
    logging_config.detach_log_channel(handler)
    logger.error("after detach")

    lines = []
    while not sink.empty():
        lines.append(sink.get_nowait())
    assert lines == ["WARNING Failed to open path: no file browser available"]


def test_home_directory_is_redacted():
    sink: SimpleQueue[str] = SimpleQueue()
    handler = logging_config.attach_log_channel(sink)
    try:
        logging.getLogger("tests.logging.redact").warning("Removed %s", Path.home() / "games" / "es")
    finally:
        logging_config.detach_log_channel(handler)

    line = sink.get_nowait()
    assert str(Path.home()) not in line
    assert logging_config.USER_HOME_PLACEHOLDER in line
