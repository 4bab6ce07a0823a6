"""
Logging setup for the watchdog.

Logs go to a size-rotated file and to the console. Once the process has
daemonized the console is the null device, so the file is what remains.
"""

import logging
from logging.handlers import RotatingFileHandler

from .config import WatchdogConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config: WatchdogConfig) -> None:
    """Configure the root logger from the run configuration."""
    log_formatter = logging.Formatter(LOG_FORMAT)

    # Rotating file handler (auto-compaction)
    config.log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        config.log_file,
        maxBytes=config.log_max_bytes,
        backupCount=config.log_backup_count,
    )
    file_handler.setFormatter(log_formatter)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        handlers=[file_handler, console_handler],
        force=True,
    )
