"""Command-line front end: reads commands, drives timers, prints menus and notices."""

from __future__ import annotations

import argparse
import queue
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Iterator, TextIO

from .logger import TimeLogger
from .models import STATUS_UPDATE_INTERVAL
from .tracker import Command, MenuItem, SessionEvent, TimerId, TimeTracker, TrayEvent

Action = Command | TrayEvent | SessionEvent

_WORDS: dict[str, Action] = {
    "in": Command.CLOCK_IN,
    "clock in": Command.CLOCK_IN,
    "clockin": Command.CLOCK_IN,
    "out": Command.CLOCK_OUT,
    "clock out": Command.CLOCK_OUT,
    "clockout": Command.CLOCK_OUT,
    "break": Command.START_BREAK,
    "start break": Command.START_BREAK,
    "end break": Command.END_BREAK,
    "resume": Command.END_BREAK,
    "log": Command.VIEW_LOG,
    "view log": Command.VIEW_LOG,
    "weekly": Command.VIEW_WEEKLY,
    "view weekly": Command.VIEW_WEEKLY,
    "exit": Command.EXIT,
    "quit": Command.EXIT,
    "menu": TrayEvent.CONTEXT_MENU,
    "status": TrayEvent.CONTEXT_MENU,
    "toggle": TrayEvent.LEFT_DOUBLE_CLICK,
    "lock": SessionEvent.LOCK,
    "unlock": SessionEvent.UNLOCK,
    "logoff": SessionEvent.LOGOFF,
    "logon": SessionEvent.LOGON,
}

_COMMAND_WORD = {
    Command.CLOCK_IN: "in",
    Command.CLOCK_OUT: "out",
    Command.START_BREAK: "break",
    Command.END_BREAK: "end break",
    Command.VIEW_LOG: "log",
    Command.VIEW_WEEKLY: "weekly",
    Command.EXIT: "exit",
}

_SEPARATOR_LINE = "-" * 24


class TimerLoop:
    """Fires the tracker's active timers once their intervals have elapsed."""

    def __init__(
        self, tracker: TimeTracker, tick: Callable[[], datetime] | None = None
    ) -> None:
        self.tracker = tracker
        self._tick = tick or datetime.now
        self._due: dict[TimerId, datetime] = {}
        self.running = False

    def start(self) -> None:
        """Begin firing timers on later calls to :meth:`run_pending`."""
        self.running = True
        self._due.clear()

    def stop(self) -> None:
        """Stop firing timers and forget their schedules."""
        self.running = False
        self._due.clear()

    def run_pending(self) -> list[TimerId]:
        """Fire every active timer that is due; return the ones fired, in order."""
        if not self.running:
            return []

        now = self._tick()
        active = self.tracker.active_timers
        for timer in list(self._due):
            if timer not in active:
                del self._due[timer]

        fired: list[TimerId] = []
        for timer in TimerId:
            if timer not in self.tracker.active_timers:
                self._due.pop(timer, None)
                continue
            due = self._due.get(timer)
            if due is None:
                self._due[timer] = now + timer.interval
                continue
            if now >= due:
                self.tracker.handle_timer(timer)
                fired.append(timer)
                self._due[timer] = now + timer.interval
        return fired


def parse_command(text: str) -> Action:
    """Turn a typed line into a menu command, tray event or session event."""
    words = " ".join(text.strip().lower().replace("-", " ").replace("_", " ").split())
    if not words:
        raise ValueError("empty command")
    if words in _WORDS:
        return _WORDS[words]
    if words.isdigit():
        try:
            return Command(int(words))
        except ValueError:
            pass
    raise ValueError(f"unknown command {text.strip()!r}")


def _render_menu(items: Iterable[MenuItem]) -> Iterator[str]:
    for item in items:
        if item.separator:
            yield _SEPARATOR_LINE
        elif item.command is None:
            yield item.label
        else:
            yield f"{item.label}  ({_COMMAND_WORD[item.command]})"


def run_session(tracker: TimeTracker, lines: Iterable[str], output: TextIO) -> None:
    """Carry out typed commands until the input ends or exit is requested."""
    for line in lines:
        if not line.strip():
            continue
        try:
            action = parse_command(line)
        except ValueError as exc:
            output.write(f"error: {exc}\n")
            continue

        if isinstance(action, Command):
            tracker.handle_command(action)
        elif isinstance(action, TrayEvent):
            menu = tracker.handle_tray_event(action)
            if menu is not None:
                output.writelines(f"{text}\n" for text in _render_menu(menu))
        else:
            tracker.handle_session_event(action)

        if tracker.quit_requested:
            break


def _read_lines(stream: TextIO, lines: "queue.Queue[str | None]") -> None:
    try:
        for line in stream:
            lines.put(line)
    finally:
        lines.put(None)


def _lines_with_timers(
    loop: TimerLoop, lines: "queue.Queue[str | None]", poll: float
) -> Iterator[str]:
    while True:
        try:
            line = lines.get(timeout=poll)
        except queue.Empty:
            loop.run_pending()
            continue
        loop.run_pending()
        if line is None:
            return
        yield line


def main(argv: list[str] | None = None) -> int:
    """Run the tracker interactively on standard input."""
    parser = argparse.ArgumentParser(
        prog="shifttally", description="Track work time, breaks and daily hours."
    )
    parser.add_argument(
        "--dir", default=".", help="directory that holds the log files (default: current)"
    )
    args = parser.parse_args(argv)

    directory = Path(args.dir)
    if not directory.is_dir():
        print(f"error: {directory} is not a directory", file=sys.stderr)
        return 1

    out = sys.stdout

    def notify(title: str, message: str) -> None:
        out.write(f"{title}: {message}\n")
        out.flush()

    tracker = TimeTracker(TimeLogger(directory), notifier=notify)
    loop = TimerLoop(tracker)
    pending: "queue.Queue[str | None]" = queue.Queue()
    reader = threading.Thread(target=_read_lines, args=(sys.stdin, pending), daemon=True)

    loop.start()
    reader.start()
    try:
        run_session(
            tracker,
            _lines_with_timers(loop, pending, STATUS_UPDATE_INTERVAL.total_seconds()),
            out,
        )
    finally:
        loop.stop()
        tracker.cleanup()
    return 0