"""Formatting of timestamps and durations, and the legal break rule."""

from __future__ import annotations

from datetime import datetime, timedelta

from .models import (
    FIRST_BREAK_AFTER,
    FIRST_BREAK_DURATION,
    SECOND_BREAK_AFTER,
    SECOND_BREAK_DURATION,
)

_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE


def _now(now: datetime | None) -> datetime:
    return datetime.now() if now is None else now


def get_current_timestamp(now: datetime | None = None) -> str:
    """Return the local time as ``YYYY-MM-DD HH:MM:SS``."""
    return _now(now).strftime("%Y-%m-%d %H:%M:%S")


def get_date_string(now: datetime | None = None) -> str:
    """Return the local date as ``YYYY-MM-DD``."""
    return _now(now).strftime("%Y-%m-%d")


def get_week_string(now: datetime | None = None) -> str:
    """Return the year and Sunday-based week number as ``YYYY-WNN``."""
    return _now(now).strftime("%Y-W%U")


def _truncating_div(value: int, unit: int) -> int:
    quotient = abs(value) // unit
    return quotient if value >= 0 else -quotient


def _split(duration: timedelta) -> tuple[int, int, int]:
    """Split into hours, minutes and seconds, each truncated toward zero."""
    total = duration // timedelta(microseconds=1)
    hours = _truncating_div(total, _US_PER_HOUR)
    total -= hours * _US_PER_HOUR
    minutes = _truncating_div(total, _US_PER_MINUTE)
    total -= minutes * _US_PER_MINUTE
    seconds = _truncating_div(total, _US_PER_SECOND)
    return hours, minutes, seconds


def format_duration(duration: timedelta) -> str:
    """Format as ``<h>h <m>m``, dropping seconds."""
    hours, minutes, _ = _split(duration)
    return f"{hours}h {minutes}m"


def format_time_countdown(duration: timedelta) -> str:
    """Format as ``HH:MM:SS`` with two-digit zero padding."""
    hours, minutes, seconds = _split(duration)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def calculate_required_breaks(work_duration: timedelta) -> timedelta:
    """Return the total break time the law requires for this much work."""
    total = timedelta(0)
    if work_duration >= FIRST_BREAK_AFTER:
        total += FIRST_BREAK_DURATION
    if work_duration >= SECOND_BREAK_AFTER:
        total += SECOND_BREAK_DURATION
    return total