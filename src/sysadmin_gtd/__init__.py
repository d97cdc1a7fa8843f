"""sysadmin-gtd: a day-by-day task tracker with contexts and carry-over."""

__version__ = "0.1.0"
