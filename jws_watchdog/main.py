"""
Watchdog entry point.

Startup order matters: paths are resolved before daemonizing (which
changes directory to "/"), and the PID file is written by the final
daemon process so it records the right pid.
"""

import logging
import sys

from .config import ConfigError, WatchdogConfig, parse_args
from .daemon import daemonize
from .logs import setup_logging
from .pidfile import PidFile
from .signals import ShutdownFlag, SignalBridge
from .supervisor import Supervisor

logger = logging.getLogger(__name__)


def run(config: WatchdogConfig) -> int:
    """Run the watchdog with a parsed configuration. Returns the exit code."""
    if not config.foreground:
        logger.info("Starting watchdog daemon...")
        try:
            daemonize()
        except OSError as e:
            logger.error(f"Failed to daemonize: {e}")
            return 1

    pid_file = PidFile(config.pid_file)
    try:
        pid_file.write()
    except OSError as e:
        logger.error(f"Failed to write PID file {config.pid_file}: {e}")
        pid_file.remove()
        return 1

    flag = ShutdownFlag()
    supervisor = Supervisor(config.server_path, flag)
    bridge = SignalBridge(flag, supervisor.child_pid)
    bridge.install()

    try:
        outcome = supervisor.run()
        logger.info(f"Watchdog stopped ({outcome.value})")
    finally:
        bridge.restore()
        pid_file.remove()

    return 0


def main(argv: list[str] | None = None) -> int:
    try:
        config = parse_args(argv)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        setup_logging(config)
    except OSError as e:
        print(f"Error: cannot open log file {config.log_file}: {e}", file=sys.stderr)
        return 1

    return run(config)


if __name__ == "__main__":
    sys.exit(main())
