"""Terminal work-time tracking with breaks, legal break rules and plain-text logs."""

__version__ = "0.1.0"