"""
Configuration for the watchdog.

Loads defaults from environment variables (and a .env file in the launch
directory), then overlays command-line options into an immutable
WatchdogConfig. All paths are made absolute here, before daemonizing
changes the working directory.
"""

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Defaults
DEFAULT_SERVER_PATH = os.environ.get("JWS_SERVER_PATH", "./just-weather-server")
DEFAULT_PID_FILE = os.environ.get("JWS_WATCHDOG_PID_FILE", "/tmp/jws-watchdog.pid")
DEFAULT_LOG_FILE = os.environ.get("JWS_WATCHDOG_LOG_FILE", "/tmp/jws-watchdog.log")

# Restart policy
MAX_RESTARTS = 10
RESTART_WINDOW_SECONDS = 60
INITIAL_BACKOFF_MS = 1000
MAX_BACKOFF_MS = 30000

# Supervision loop
POLL_INTERVAL_SECONDS = 0.1
EXEC_FAILURE_EXIT_CODE = 127


class ConfigError(ValueError):
    """Raised when the command line or environment describes an unusable setup."""


@dataclass(frozen=True)
class WatchdogConfig:
    """Watchdog run configuration."""

    server_path: Path
    pid_file: Path
    log_file: Path
    foreground: bool = False
    verbose: bool = False

    # Logging
    log_max_bytes: int = int(os.environ.get("LOG_MAX_BYTES", str(10 * 1024 * 1024)))  # 10MB
    log_backup_count: int = int(os.environ.get("LOG_BACKUP_COUNT", "5"))


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="jws-watchdog",
        description="Run a server executable and restart it when it crashes.",
    )
    parser.add_argument(
        "-s",
        "--server",
        metavar="PATH",
        default=DEFAULT_SERVER_PATH,
        help=f"Path to server binary (default: {DEFAULT_SERVER_PATH})",
    )
    parser.add_argument(
        "-p",
        "--pid",
        metavar="PATH",
        default=DEFAULT_PID_FILE,
        help=f"PID file path (default: {DEFAULT_PID_FILE})",
    )
    parser.add_argument(
        "-f",
        "--foreground",
        action="store_true",
        help="Run in foreground (don't daemonize)",
    )
    parser.add_argument(
        "-l",
        "--log-file",
        metavar="PATH",
        default=DEFAULT_LOG_FILE,
        help=f"Log file path (default: {DEFAULT_LOG_FILE})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def check_executable(path: str) -> Path:
    """Return the absolute, symlink-resolved path of an executable file.

    Raises ConfigError if the path does not name an executable regular file.
    """
    if not os.path.isfile(path) or not os.access(path, os.X_OK):
        raise ConfigError(f"Server binary not found or not executable: {path}")
    return Path(os.path.realpath(path))


def parse_args(argv: list[str] | None = None) -> WatchdogConfig:
    """Parse command-line arguments into a WatchdogConfig."""
    args = build_parser().parse_args(argv)

    return WatchdogConfig(
        server_path=check_executable(args.server),
        pid_file=Path(args.pid).expanduser().absolute(),
        log_file=Path(args.log_file).expanduser().absolute(),
        foreground=args.foreground,
        verbose=args.verbose,
    )
