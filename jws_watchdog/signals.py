"""
Translate termination signals into a shutdown request.

The handler only sets a flag and forwards SIGTERM to the current child;
everything else happens in the supervision loop once it sees the flag.
"""

import os
import signal
from typing import Callable

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownFlag:
    """Set-once flag shared between signal handlers and the main loop."""

    def __init__(self):
        # Plain attribute: a Lock here could deadlock if the handler fires
        # while the main thread holds it.
        self._set = False

    def set(self):
        self._set = True

    def is_set(self) -> bool:
        return self._set


class SignalBridge:
    """Installs SIGINT/SIGTERM handlers that request shutdown."""

    def __init__(self, flag: ShutdownFlag, child_pid: Callable[[], int | None]):
        self.flag = flag
        self._child_pid = child_pid
        self._previous: dict[int, object] = {}

    def handle(self, signum, frame):
        self.flag.set()
        pid = self._child_pid()
        if pid is not None:
            try:
                os.kill(pid, signal.SIGTERM)
            except ProcessLookupError:
                pass

    def install(self):
        for signum in HANDLED_SIGNALS:
            self._previous[signum] = signal.signal(signum, self.handle)

    def restore(self):
        """Reinstate the handlers that were active before install()."""
        for signum, handler in self._previous.items():
            # None means the previous handler was not installed from Python
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous.clear()
