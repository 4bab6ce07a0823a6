"""
Operator commands for a running watchdog.

Reads the watchdog's PID file to report whether it is alive (and which
server process it is supervising) or to stop it.
"""

import argparse
import signal
import sys
from pathlib import Path

import psutil

from .config import DEFAULT_PID_FILE
from .pidfile import read_pid


def _watchdog_process(pid_file: Path) -> psutil.Process | None:
    """The watchdog process named by the PID file, or None if it is not running."""
    pid = read_pid(pid_file)
    if pid is None:
        return None
    try:
        return psutil.Process(pid)
    except psutil.NoSuchProcess:
        return None


def status(pid_file: Path) -> int:
    """Print watchdog status. Returns 0 if it is running, 1 otherwise."""
    if not pid_file.exists():
        print("Watchdog not running.")
        return 1

    proc = _watchdog_process(pid_file)
    if proc is None or not proc.is_running():
        print("Watchdog not running (stale PID file)")
        return 1

    print(f"Watchdog running (PID {proc.pid})")
    try:
        children = [child.pid for child in proc.children()]
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        children = []
    print(f"Server PID: {', '.join(str(pid) for pid in children) if children else 'none'}")
    return 0


def stop(pid_file: Path, timeout: float = 2.0) -> int:
    """Stop the watchdog, escalating to SIGKILL after timeout seconds."""
    proc = _watchdog_process(pid_file)
    if proc is None:
        print("Watchdog not running.")
        pid_file.unlink(missing_ok=True)
        return 1

    print(f"Stopping watchdog (PID {proc.pid})...")
    try:
        proc.send_signal(signal.SIGTERM)
        _, alive = psutil.wait_procs([proc], timeout=timeout)
        if alive:
            print("Force killing...")
            proc.kill()
            proc.wait(timeout=5)
    except psutil.NoSuchProcess:
        pass
    except psutil.AccessDenied:
        print(f"Permission denied signalling PID {proc.pid}", file=sys.stderr)
        return 1
    except psutil.TimeoutExpired:
        print(f"PID {proc.pid} still running after SIGKILL", file=sys.stderr)
        return 1

    # The watchdog removes it itself unless it was killed
    pid_file.unlink(missing_ok=True)
    print("Stopped.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jws-watchdogctl",
        description="Inspect or stop a running jws-watchdog.",
    )
    parser.add_argument(
        "-p",
        "--pid",
        metavar="PATH",
        default=DEFAULT_PID_FILE,
        help=f"Watchdog PID file (default: {DEFAULT_PID_FILE})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("status", help="Show whether the watchdog is running")
    stop_parser = subparsers.add_parser("stop", help="Stop the watchdog and its server")
    stop_parser.add_argument(
        "--timeout",
        type=float,
        default=2.0,
        help="Seconds to wait after SIGTERM before SIGKILL (default: 2)",
    )

    args = parser.parse_args(argv)
    pid_file = Path(args.pid)

    if args.command == "status":
        return status(pid_file)
    return stop(pid_file, timeout=args.timeout)


if __name__ == "__main__":
    sys.exit(main())
