"""Pytest configuration and shared fixtures for watchdog tests."""

import stat
from collections.abc import Callable
from pathlib import Path

import pytest

from jws_watchdog.process import ExitStatus


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeChild:
    """Stand-in for ChildProcess driven entirely by the test."""

    def __init__(self, pid: int, returncode: int | None = None, polls_before_exit: int = 0):
        self.pid = pid
        self.returncode = returncode
        self.polls_before_exit = polls_before_exit
        self.terminated = False
        self.waited = False

    def poll(self) -> ExitStatus | None:
        if self.terminated:
            return ExitStatus(-15)
        if self.polls_before_exit > 0:
            self.polls_before_exit -= 1
            return None
        if self.returncode is None:
            return None
        return ExitStatus(self.returncode)

    def terminate(self) -> None:
        self.terminated = True

    def wait(self) -> ExitStatus:
        self.waited = True
        return ExitStatus(-15 if self.terminated else (self.returncode or 0))

    def uptime(self) -> float:
        return 0.0


class FakeSpawner:
    """Callable replacing process.spawn; builds children from a factory."""

    def __init__(self, factory: Callable[[int], FakeChild]):
        self._factory = factory
        self.children: list[FakeChild] = []
        self.paths: list[Path] = []

    def __call__(self, path: Path) -> FakeChild:
        self.paths.append(path)
        child = self._factory(1000 + len(self.children))
        self.children.append(child)
        return child


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_script(tmp_path: Path) -> Callable[..., Path]:
    """Write an executable /bin/sh script and return its path."""

    def _make(body: str, name: str = "server", executable: bool = True) -> Path:
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        if executable:
            path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make
