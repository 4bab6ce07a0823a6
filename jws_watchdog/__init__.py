"""
jws-watchdog - keeps a server process running.

Launches a server executable, restarts it after crashes with exponential
backoff inside a sliding restart window, and shuts it down on SIGINT/SIGTERM.
"""

__version__ = "0.1.0"
