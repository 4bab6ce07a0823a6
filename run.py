"""Run the watchdog."""

import sys

from jws_watchdog.main import main

if __name__ == "__main__":
    sys.exit(main())
