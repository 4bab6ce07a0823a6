"""
Handle on the supervised server process.

Starts the server executable with no arguments, polls it without
blocking, and interprets how it ended: exit code 0 is a deliberate stop,
anything else (non-zero exit, death by signal) is a crash.
"""

import logging
import signal
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExitStatus:
    """How a child process ended, in Popen.returncode terms."""

    returncode: int

    @property
    def clean(self) -> bool:
        return self.returncode == 0

    @property
    def term_signal(self) -> signal.Signals | None:
        """The signal that killed the process, if it was killed by one."""
        if self.returncode >= 0:
            return None
        try:
            return signal.Signals(-self.returncode)
        except ValueError:
            return None

    def describe(self) -> str:
        if self.returncode < 0:
            sig = self.term_signal
            return f"killed by {sig.name if sig else f'signal {-self.returncode}'}"
        return f"exited with code {self.returncode}"


class ChildProcess:
    """A running (or finished) server process."""

    def __init__(self, process: subprocess.Popen):
        self._process = process
        self.started_at = datetime.now()

    @property
    def pid(self) -> int:
        return self._process.pid

    def poll(self) -> ExitStatus | None:
        """Return the exit status if the process has ended, else None. Never blocks."""
        returncode = self._process.poll()
        if returncode is None:
            return None
        return ExitStatus(returncode)

    def terminate(self):
        """Send SIGTERM. A no-op if the process has already been reaped."""
        try:
            self._process.send_signal(signal.SIGTERM)
        except ProcessLookupError:
            pass

    def wait(self) -> ExitStatus:
        """Block until the process has exited."""
        return ExitStatus(self._process.wait())

    def uptime(self) -> float:
        return (datetime.now() - self.started_at).total_seconds()


def spawn(path: Path) -> ChildProcess:
    """Start the server executable.

    Raises OSError if the process cannot be created or the executable
    cannot be run.
    """
    process = subprocess.Popen(
        [str(path)],
        start_new_session=True,  # Terminal signals reach the watchdog only
    )
    logger.info(f"Started {path} with PID {process.pid}")
    return ChildProcess(process)
