"""
Restart policy: a sliding restart-count window plus exponential backoff.

A server that crashes now and then keeps being restarted indefinitely,
because the count resets once a window has passed. One that crash-loops
exhausts the budget inside a single window and is given up on.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from .config import INITIAL_BACKOFF_MS, MAX_BACKOFF_MS, MAX_RESTARTS, RESTART_WINDOW_SECONDS

logger = logging.getLogger(__name__)


class SupervisorPhase(Enum):
    IDLE = "idle"
    SPAWNING = "spawning"
    RUNNING = "running"
    CRASHED = "crashed"
    EXITED_CLEAN = "exited_clean"
    SHUTDOWN_REQUESTED = "shutdown_requested"
    RESTART_BACKOFF = "restart_backoff"
    TERMINAL = "terminal"


@dataclass
class WatchdogState:
    """Mutable supervision state, owned by the supervision loop."""

    window_start: float
    child_pid: int | None = None
    restart_count: int = 0
    backoff_ms: int = INITIAL_BACKOFF_MS
    phase: SupervisorPhase = field(default=SupervisorPhase.IDLE)


class RestartPolicy:
    """Decides whether to restart and how long to wait first."""

    def __init__(
        self,
        state: WatchdogState,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        max_restarts: int = MAX_RESTARTS,
        window_seconds: float = RESTART_WINDOW_SECONDS,
        initial_backoff_ms: int = INITIAL_BACKOFF_MS,
        max_backoff_ms: int = MAX_BACKOFF_MS,
    ):
        self.state = state
        self._clock = clock
        self._sleep = sleep
        self.max_restarts = max_restarts
        self.window_seconds = window_seconds
        self.initial_backoff_ms = initial_backoff_ms
        self.max_backoff_ms = max_backoff_ms

    def should_restart(self) -> bool:
        """Return True if another restart is allowed in the current window.

        Starts a fresh window (count and backoff back to their initial
        values) once more than window_seconds have passed since the
        current one began.
        """
        now = self._clock()
        if now - self.state.window_start > self.window_seconds:
            logger.debug("Restart window elapsed, resetting restart count and backoff")
            self.state.restart_count = 0
            self.state.window_start = now
            self.state.backoff_ms = self.initial_backoff_ms

        return self.state.restart_count < self.max_restarts

    def apply_backoff(self):
        """Block for the current backoff, then double it and count the restart."""
        logger.info(
            f"Restarting in {self.state.backoff_ms} ms "
            f"(restart {self.state.restart_count + 1}/{self.max_restarts})"
        )
        self._sleep(self.state.backoff_ms / 1000)

        self.state.backoff_ms = min(self.state.backoff_ms * 2, self.max_backoff_ms)
        self.state.restart_count += 1
