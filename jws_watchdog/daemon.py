"""
Detach the watchdog from its controlling terminal.

Classic double fork: the first child becomes a session leader, the second
child (which is not a session leader) can never acquire a controlling
terminal again.
"""

import logging
import os
import sys

logger = logging.getLogger(__name__)


def daemonize() -> None:
    """Turn the calling process into a background daemon.

    Only the final grandchild returns. Raises OSError if any step fails;
    paths the caller still needs must already be absolute, because the
    working directory becomes "/".
    """
    # Buffered output would otherwise be written once per surviving process
    sys.stdout.flush()
    sys.stderr.flush()

    if os.fork() > 0:
        os._exit(0)

    os.setsid()

    if os.fork() > 0:
        os._exit(0)

    os.umask(0)
    os.chdir("/")

    devnull = os.open(os.devnull, os.O_RDWR)
    try:
        for fd in (0, 1, 2):
            os.dup2(devnull, fd)
    finally:
        if devnull > 2:
            os.close(devnull)

    logger.info(f"Daemonized with PID {os.getpid()}")
