"""
PID file handling.

The watchdog records its own process id for external tooling; it never
reads the file back itself.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class PidFile:
    """The watchdog's PID file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._created = False

    def write(self):
        """Write the current process id, truncating any existing file.

        Raises OSError on failure.
        """
        with open(self.path, "w") as f:
            self._created = True
            f.write(f"{os.getpid()}\n")
        logger.debug(f"Wrote PID file {self.path}")

    def remove(self):
        """Remove the PID file if this process wrote it. Failures are logged, never raised."""
        if not self._created:
            return
        try:
            self.path.unlink()
            logger.debug(f"Removed PID file {self.path}")
            self._created = False
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove PID file {self.path}: {e}")


def read_pid(path: Path) -> int | None:
    """Read a process id from a PID file. Returns None if missing or garbled."""
    try:
        with open(path) as f:
            return int(f.read().strip())
    except (OSError, ValueError):
        return None
