"""
The supervision loop.

Spawns the server, polls it every POLL_INTERVAL_SECONDS, and on exit
either stops (clean exit, shutdown requested, restart budget spent) or
backs off and spawns it again.
"""

import logging
import time
from enum import Enum
from pathlib import Path
from typing import Callable

from .config import EXEC_FAILURE_EXIT_CODE, POLL_INTERVAL_SECONDS
from .policy import RestartPolicy, SupervisorPhase, WatchdogState
from .process import ChildProcess, ExitStatus, spawn
from .signals import ShutdownFlag

logger = logging.getLogger(__name__)


class Outcome(Enum):
    CLEAN_EXIT = "clean_exit"
    SHUTDOWN = "shutdown"
    RESTARTS_EXHAUSTED = "restarts_exhausted"


class Supervisor:
    """Keeps one server process alive."""

    def __init__(
        self,
        server_path: Path,
        flag: ShutdownFlag,
        spawn_fn: Callable[[Path], ChildProcess] = spawn,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        policy: RestartPolicy | None = None,
    ):
        self.server_path = server_path
        self.flag = flag
        self._spawn = spawn_fn
        self._sleep = sleep
        self.poll_interval = poll_interval

        if policy is None:
            policy = RestartPolicy(WatchdogState(window_start=clock()), clock=clock, sleep=sleep)
        self.policy = policy
        self.state = policy.state
        self._child: ChildProcess | None = None

    def child_pid(self) -> int | None:
        """Snapshot of the current child pid, for the signal bridge."""
        return self.state.child_pid

    def run(self) -> Outcome:
        """Supervise until shutdown, a clean server exit, or the restart budget is spent."""
        logger.info(f"Supervising {self.server_path}")
        outcome = Outcome.SHUTDOWN

        try:
            while not self.flag.is_set():
                status = self._check_child()
                if status is None:
                    self._sleep(self.poll_interval)
                    continue

                if status.clean:
                    # The server asked to be decommissioned; do not restart it
                    self.state.phase = SupervisorPhase.EXITED_CLEAN
                    logger.info("Server exited cleanly, stopping watchdog")
                    outcome = Outcome.CLEAN_EXIT
                    break

                self.state.phase = SupervisorPhase.CRASHED
                logger.warning(f"Server {status.describe()}")

                if self.flag.is_set():
                    break

                if not self.policy.should_restart():
                    logger.critical(
                        f"Server crashed {self.state.restart_count + 1} times within "
                        f"{self.policy.window_seconds}s, giving up"
                    )
                    outcome = Outcome.RESTARTS_EXHAUSTED
                    break

                self.state.phase = SupervisorPhase.RESTART_BACKOFF
                self.policy.apply_backoff()

            if self.flag.is_set():
                self.state.phase = SupervisorPhase.SHUTDOWN_REQUESTED
                logger.info("Shutdown requested")
        finally:
            self._stop_child()
            self.state.phase = SupervisorPhase.TERMINAL

        return outcome

    def _check_child(self) -> ExitStatus | None:
        """Spawn the server if needed and poll it. Returns its exit status once it has ended."""
        if self._child is None:
            self.state.phase = SupervisorPhase.SPAWNING
            try:
                self._child = self._spawn(self.server_path)
            except OSError as e:
                logger.error(f"Failed to start {self.server_path}: {e}")
                return ExitStatus(EXEC_FAILURE_EXIT_CODE)
            self.state.child_pid = self._child.pid
            self.state.phase = SupervisorPhase.RUNNING

        status = self._child.poll()
        if status is not None:
            # Reaped: the pid may be reused, so hide it from the signal bridge first
            self.state.child_pid = None
            child, self._child = self._child, None
            logger.debug(f"Server PID {child.pid} ended after {child.uptime():.1f}s")
        return status

    def _stop_child(self):
        """Terminate the running child, if any, and wait for it to exit."""
        if self._child is None:
            return

        child = self._child
        logger.info(f"Stopping server PID {child.pid}")
        child.terminate()
        try:
            status = child.wait()
            logger.info(f"Server {status.describe()}")
        except ChildProcessError:
            pass

        self._child = None
        self.state.child_pid = None
