"""Tests for PID file writing, removal and reading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from jws_watchdog.pidfile import PidFile, read_pid


class TestPidFile:
    def test_write_contains_own_pid_and_newline(self, tmp_path: Path) -> None:
        path = tmp_path / "watchdog.pid"
        PidFile(path).write()
        assert path.read_text() == f"{os.getpid()}\n"

    def test_write_truncates_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "watchdog.pid"
        path.write_text("1234567890123456789\nleftover\n")
        PidFile(path).write()
        assert path.read_text() == f"{os.getpid()}\n"

    def test_write_failure_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            PidFile(tmp_path / "missing-dir" / "watchdog.pid").write()

    def test_remove(self, tmp_path: Path) -> None:
        path = tmp_path / "watchdog.pid"
        pid_file = PidFile(path)
        pid_file.write()
        pid_file.remove()
        assert not path.exists()

    def test_remove_missing_file(self, tmp_path: Path) -> None:
        PidFile(tmp_path / "watchdog.pid").remove()

    def test_remove_failure_is_logged(self, tmp_path: Path, caplog) -> None:
        pid_file = PidFile(tmp_path / "watchdog.pid")
        pid_file.write()
        with patch.object(Path, "unlink", side_effect=PermissionError(13, "Permission denied")):
            with caplog.at_level("ERROR"):
                pid_file.remove()
        assert "Failed to remove PID file" in caplog.text

    def test_remove_leaves_file_it_did_not_write(self, tmp_path: Path) -> None:
        path = tmp_path / "watchdog.pid"
        path.write_text("4242\n")
        PidFile(path).remove()
        assert path.read_text() == "4242\n"

    def test_failed_write_leaves_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "watchdog.pid"
        path.write_text("4242\n")
        pid_file = PidFile(path)
        with patch("jws_watchdog.pidfile.open", create=True, side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(PermissionError):
                pid_file.write()
        pid_file.remove()
        assert path.read_text() == "4242\n"


class TestReadPid:
    def test_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "watchdog.pid"
        path.write_text("4242\n")
        assert read_pid(path) == 4242

    def test_missing(self, tmp_path: Path) -> None:
        assert read_pid(tmp_path / "watchdog.pid") is None

    def test_garbled(self, tmp_path: Path) -> None:
        path = tmp_path / "watchdog.pid"
        path.write_text("not-a-number")
        assert read_pid(path) is None
