"""Append-only activity logs and the per-day hours file."""

from __future__ import annotations

import os
import subprocess
import sys
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

from . import time_utils
from .models import SESSION_LOG_FILE, TIME_LOG_FILE, WEEKLY_LOG_FILE


class TimeLogger:
    """Writes clock events, session events and daily totals to text files."""

    def __init__(
        self,
        directory: str | os.PathLike[str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        base = Path(directory) if directory is not None else Path()
        self.time_log_path = base / TIME_LOG_FILE
        self.weekly_log_path = base / WEEKLY_LOG_FILE
        self.session_log_path = base / SESSION_LOG_FILE
        self._clock = clock or datetime.now
        self._lock = threading.Lock()

    def _append(self, path: Path, text: str) -> None:
        try:
            with path.open("a", encoding="utf-8") as log_file:
                log_file.write(f"{time_utils.get_current_timestamp(self._clock())} - {text}\n")
        except OSError:
            pass

    def log_time_entry(self, action: str, is_automatic: bool = False) -> None:
        """Append a clock event, marked ``[AUTO]`` when automatic."""
        prefix = "[AUTO] " if is_automatic else ""
        with self._lock:
            self._append(self.time_log_path, prefix + action)

    def log_session_event(self, action: str) -> None:
        """Append a desktop session event such as a lock or logoff."""
        with self._lock:
            self._append(self.session_log_path, action)

    def update_weekly_hours(self, work_duration: timedelta) -> None:
        """Record today's net work time, replacing any earlier line for today."""
        with self._lock:
            today = time_utils.get_date_string(self._clock())
            entry = f"{today} - {time_utils.format_duration(work_duration)}"
            try:
                with self.weekly_log_path.open(encoding="utf-8") as read_file:
                    existing = [line.rstrip("\n") for line in read_file]
            except FileNotFoundError:
                existing = []

            lines = [entry if line.startswith(today) else line for line in existing]
            if not any(line.startswith(today) for line in existing):
                lines.append(entry)

            with self.weekly_log_path.open("w", encoding="utf-8") as write_file:
                write_file.writelines(f"{line}\n" for line in lines)

    def open_time_log(self) -> bool:
        """Open the clock event log in the system's default viewer."""
        return _open_with_default_app(self.time_log_path)

    def open_weekly_log(self) -> bool:
        """Open the daily hours file in the system's default viewer."""
        return _open_with_default_app(self.weekly_log_path)

    def open_session_log(self) -> bool:
        """Open the session event log in the system's default viewer."""
        return _open_with_default_app(self.session_log_path)


def _open_with_default_app(path: Path) -> bool:
    try:
        if sys.platform == "win32":
            os.startfile(str(path))  # type: ignore[attr-defined]
        else:
            opener = "open" if sys.platform == "darwin" else "xdg-open"
            subprocess.Popen([opener, str(path)])
    except OSError:
        return False
    return True