"""Work states, record types and the tracker's fixed limits."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta

# Work time limits.
MAX_WORK_HOURS = timedelta(hours=10)
FIRST_BREAK_AFTER = timedelta(hours=6)
SECOND_BREAK_AFTER = timedelta(hours=9)

# Durations of the legally required breaks.
FIRST_BREAK_DURATION = timedelta(minutes=30)
SECOND_BREAK_DURATION = timedelta(minutes=15)

# How often the periodic checks run.
BREAK_CHECK_INTERVAL = timedelta(minutes=1)
STATUS_UPDATE_INTERVAL = timedelta(seconds=1)

# Log file names.
TIME_LOG_FILE = "time_log.txt"
WEEKLY_LOG_FILE = "weekly_hours.txt"
SESSION_LOG_FILE = "session_log.txt"


class WorkState(enum.Enum):
    """Where the user currently is in the work day."""

    CLOCKED_OUT = "clocked_out"
    CLOCKED_IN = "clocked_in"
    ON_BREAK = "on_break"


@dataclass
class TimeEntry:
    """A single logged action with the moment it happened."""

    action: str
    is_automatic: bool = False
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class WorkSession:
    """One span of work between clocking in and clocking out."""

    start_time: datetime | None = None
    end_time: datetime | None = None
    total_break_time: timedelta = field(default_factory=timedelta)
    has_first_break: bool = False
    has_second_break: bool = False