"""Tests for logging setup."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import MagicMock, patch

from jws_watchdog.config import WatchdogConfig
from jws_watchdog.logs import LOG_FORMAT, setup_logging


def make_config(tmp_path: Path, verbose: bool = False) -> WatchdogConfig:
    return WatchdogConfig(
        server_path=Path("/bin/true"),
        pid_file=tmp_path / "watchdog.pid",
        log_file=tmp_path / "logs" / "watchdog.log",
        verbose=verbose,
        log_max_bytes=1024,
        log_backup_count=2,
    )


class TestSetupLogging:
    @patch("jws_watchdog.logs.logging.basicConfig")
    def test_rotating_file_and_console(self, mock_basic: MagicMock, tmp_path: Path) -> None:
        setup_logging(make_config(tmp_path))

        kwargs = mock_basic.call_args.kwargs
        assert kwargs["level"] == logging.INFO
        assert kwargs["force"] is True
        file_handler, console_handler = kwargs["handlers"]
        try:
            assert isinstance(file_handler, RotatingFileHandler)
            assert file_handler.baseFilename == str(tmp_path / "logs" / "watchdog.log")
            assert file_handler.maxBytes == 1024
            assert file_handler.backupCount == 2
            assert file_handler.formatter._fmt == LOG_FORMAT
            assert type(console_handler) is logging.StreamHandler
        finally:
            file_handler.close()

    @patch("jws_watchdog.logs.logging.basicConfig")
    def test_creates_log_directory(self, mock_basic: MagicMock, tmp_path: Path) -> None:
        setup_logging(make_config(tmp_path))
        try:
            assert (tmp_path / "logs").is_dir()
        finally:
            mock_basic.call_args.kwargs["handlers"][0].close()

    @patch("jws_watchdog.logs.logging.basicConfig")
    def test_verbose_enables_debug(self, mock_basic: MagicMock, tmp_path: Path) -> None:
        setup_logging(make_config(tmp_path, verbose=True))
        try:
            assert mock_basic.call_args.kwargs["level"] == logging.DEBUG
        finally:
            mock_basic.call_args.kwargs["handlers"][0].close()
