"""Tests for user-facing output routing."""

import threading
from pathlib import Path

import pytest
from loguru import logger

from cherry_radio.core.output import (
    clear_blessed_mode,
    is_blessed_mode,
    log,
    set_blessed_mode,
    setup_loguru,
)


@pytest.fixture(autouse=True)
def quiet_loguru():
    """Drop loguru's stderr sink so captured output only holds echoed messages."""
    logger.remove()
    yield
    clear_blessed_mode()
    logger.remove()


class TestLog:
    """Tests for log()."""

    def test_info_goes_to_stdout(self, capsys) -> None:
        log("Station list refreshed [4200 stations]")

        captured = capsys.readouterr()
        assert "Station list refreshed [4200 stations]" in captured.out
        assert captured.err == ""

    def test_error_goes_to_stderr(self, capsys) -> None:
        log("mpv was not found", "error")

        captured = capsys.readouterr()
        assert "mpv was not found" in captured.err
        assert captured.out == ""

    def test_blessed_mode_suppresses_echo(self, capsys) -> None:
        set_blessed_mode()
        assert is_blessed_mode()

        log("hidden while the UI is up")

        assert capsys.readouterr().out == ""

    def test_silent_threads_only_log_to_file(self, capsys) -> None:
        def worker():
            threading.current_thread().silent_logging = True
            log("poll chatter")

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert capsys.readouterr().out == ""


class TestSetupLoguru:
    """Tests for setup_loguru()."""

    def test_writes_to_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "cherry-radio.log"
        setup_loguru(log_file, "DEBUG")

        logger.debug("switching station")

        text = log_file.read_text(encoding="utf-8")
        assert "switching station" in text
        assert "DEBUG" in text

    def test_level_filters_messages(self, tmp_path: Path) -> None:
        log_file = tmp_path / "cherry-radio.log"
        setup_loguru(log_file, "WARNING")

        logger.info("too chatty")
        logger.warning("stream dropped")

        text = log_file.read_text(encoding="utf-8")
        assert "too chatty" not in text
        assert "stream dropped" in text
