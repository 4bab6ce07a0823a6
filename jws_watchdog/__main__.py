"""
Entry point for running the watchdog via `python -m jws_watchdog`.
"""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
