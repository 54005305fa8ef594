"""The tracker's state machine: clocking in and out, breaks, limits and menus."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Protocol

from . import time_utils
from .models import (
    BREAK_CHECK_INTERVAL,
    FIRST_BREAK_AFTER,
    MAX_WORK_HOURS,
    SECOND_BREAK_AFTER,
    STATUS_UPDATE_INTERVAL,
    WorkState,
)

TARGET_WORK = timedelta(hours=8)

_WORKING_PREFIX = "⏰ Working: "
_NEXT_BREAK_PREFIX = "☕ Next Break: "
_REMAINING_PREFIX = "⏳ Remaining: "

_STATUS_TEXT = {
    WorkState.CLOCKED_IN: "🟢 Status: Working",
    WorkState.ON_BREAK: "🟡 Status: On Break",
    WorkState.CLOCKED_OUT: "🔴 Status: Clocked Out",
}

_TOOLTIP_TEXT = {
    WorkState.CLOCKED_IN: "Working",
    WorkState.ON_BREAK: "On Break",
    WorkState.CLOCKED_OUT: "Clocked Out",
}

INITIAL_TOOLTIP = "Time Tracker - Clocked OUT"
APP_TITLE = "Time Tracker"


class Command(enum.IntEnum):
    """Actions offered by the context menu."""

    CLOCK_IN = 2001
    CLOCK_OUT = 2002
    START_BREAK = 2003
    END_BREAK = 2004
    VIEW_LOG = 2005
    VIEW_WEEKLY = 2006
    EXIT = 2007


class TimerId(enum.IntEnum):
    """Periodic checks that run while the user is clocked in."""

    AUTO_BREAK = 1002
    MAX_HOURS = 1003
    STATUS_UPDATE = 1004

    @property
    def interval(self) -> timedelta:
        """How often this timer fires."""
        if self is TimerId.STATUS_UPDATE:
            return STATUS_UPDATE_INTERVAL
        return BREAK_CHECK_INTERVAL


class TrayEvent(enum.Enum):
    """Mouse interactions with the tray icon."""

    RIGHT_BUTTON_DOWN = "right_button_down"
    CONTEXT_MENU = "context_menu"
    LEFT_DOUBLE_CLICK = "left_double_click"


class SessionEvent(enum.Enum):
    """Desktop session changes."""

    LOCK = "lock"
    UNLOCK = "unlock"
    LOGOFF = "logoff"
    LOGON = "logon"


@dataclass(frozen=True)
class MenuItem:
    """One entry of the context menu; info lines carry no command."""

    label: str = ""
    command: Command | None = None
    enabled: bool = True
    separator: bool = False


SEPARATOR = MenuItem(enabled=False, separator=True)


@dataclass
class MenuInfo:
    """Live status lines shown at the top of the context menu."""

    working_time_text: str = _WORKING_PREFIX + "00:00:00"
    next_break_text: str = _NEXT_BREAK_PREFIX + "--:--:--"
    remaining_text: str = _REMAINING_PREFIX + "08:00:00"
    status_text: str = _STATUS_TEXT[WorkState.CLOCKED_OUT]

    def update_working_time(self, time_str: str) -> None:
        self.working_time_text = _WORKING_PREFIX + time_str

    def update_next_break(self, time_str: str) -> None:
        self.next_break_text = _NEXT_BREAK_PREFIX + time_str

    def update_remaining_time(self, time_str: str) -> None:
        self.remaining_text = _REMAINING_PREFIX + time_str

    def update_status(self, state: WorkState) -> None:
        self.status_text = _STATUS_TEXT.get(state, _STATUS_TEXT[WorkState.CLOCKED_OUT])


class LogSink(Protocol):
    def log_time_entry(self, action: str, is_automatic: bool = False) -> None: ...

    def log_session_event(self, action: str) -> None: ...

    def update_weekly_hours(self, work_duration: timedelta) -> None: ...

    def open_time_log(self) -> object: ...

    def open_weekly_log(self) -> object: ...


Notifier = Callable[[str, str], None]


class TimeTracker:
    """Tracks one user's work day and reacts to menu, timer and session events."""

    def __init__(
        self,
        logger: LogSink | None = None,
        clock: Callable[[], datetime] | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        if logger is None:
            from .logger import TimeLogger

            logger = TimeLogger(clock=clock)
        self.logger = logger
        self._clock = clock or datetime.now
        self._notifier = notifier
        self.state = WorkState.CLOCKED_OUT
        self.clock_in_time: datetime | None = None
        self.break_start_time: datetime | None = None
        self.first_break_taken = False
        self.second_break_taken = False
        self.menu_info = MenuInfo()
        self.last_notification: tuple[str, str] | None = None
        self.quit_requested = False
        self._tooltip = INITIAL_TOOLTIP
        self._timers: set[TimerId] = set()

    @property
    def active_timers(self) -> frozenset[TimerId]:
        """Timers that are currently running."""
        return frozenset(self._timers)

    def tooltip(self) -> str:
        """Text shown when hovering over the tray icon."""
        return self._tooltip

    def _update_tooltip(self) -> None:
        self._tooltip = _TOOLTIP_TEXT[self.state]

    def _elapsed(self, now: datetime) -> timedelta:
        return now - (self.clock_in_time or now)

    def show_notification(self, title: str, message: str) -> None:
        """Show a balloon message to the user."""
        self.last_notification = (title, message)
        if self._notifier is not None:
            self._notifier(title, message)

    def clock_in(self, is_automatic: bool = False) -> None:
        """Start a new work session."""
        self.state = WorkState.CLOCKED_IN
        self.clock_in_time = self._clock()
        self.first_break_taken = False
        self.second_break_taken = False

        self.logger.log_time_entry("CLOCK IN", is_automatic)
        self._update_tooltip()
        self.update_menu_info()
        self._timers.update(TimerId)

        if not is_automatic:
            self.show_notification(APP_TITLE, "Successfully clocked in! 🟢")

    def clock_out(self, is_automatic: bool = False) -> None:
        """End the session, deducting legally required breaks from the total."""
        if self.state is WorkState.CLOCKED_OUT:
            return

        work_duration = self._elapsed(self._clock())
        required_breaks = time_utils.calculate_required_breaks(work_duration)
        work_duration -= required_breaks

        if required_breaks > timedelta(0):
            self.logger.log_time_entry(
                "AUTO BREAKS ADDED: " + time_utils.format_duration(required_breaks), True
            )

        self.state = WorkState.CLOCKED_OUT
        net = time_utils.format_duration(work_duration)
        self.logger.log_time_entry("CLOCK OUT - Net Work Time: " + net, is_automatic)
        self.logger.update_weekly_hours(work_duration)
        self._update_tooltip()
        self.update_menu_info()
        self._timers.clear()

        if not is_automatic:
            self.show_notification(
                APP_TITLE, f"Successfully clocked out! 🔴\nNet work time: {net}"
            )

    def start_break(self, is_automatic: bool = False) -> None:
        """Begin a break; only possible while working."""
        if self.state is not WorkState.CLOCKED_IN:
            return

        self.state = WorkState.ON_BREAK
        self.break_start_time = self._clock()

        self.logger.log_time_entry("BREAK START", is_automatic)
        self._update_tooltip()
        self.update_menu_info()

        if not is_automatic:
            self.show_notification(APP_TITLE, "Break started! ☕")

    def end_break(self) -> None:
        """Return to work from a break."""
        if self.state is not WorkState.ON_BREAK:
            return

        now = self._clock()
        break_duration = now - (self.break_start_time or now)

        self.state = WorkState.CLOCKED_IN
        duration = time_utils.format_duration(break_duration)
        self.logger.log_time_entry("BREAK END - Duration: " + duration)
        self._update_tooltip()
        self.update_menu_info()

        self.show_notification(APP_TITLE, f"Break ended! ✅\nBreak duration: {duration}")

    def check_automatic_breaks(self) -> None:
        """Remind the user once of each mandatory break."""
        if self.state is not WorkState.CLOCKED_IN:
            return

        work_duration = self._elapsed(self._clock())

        if not self.first_break_taken and work_duration >= FIRST_BREAK_AFTER:
            self.first_break_taken = True
            self.show_notification(
                "Break Reminder",
                "Time for mandatory break! ⏰\n30-minute break required after 6 hours.",
            )

        if not self.second_break_taken and work_duration >= SECOND_BREAK_AFTER:
            self.second_break_taken = True
            self.show_notification(
                "Second Break Reminder",
                "Time for second break! ⏰\n15-minute break required after 9 hours.",
            )

    def check_max_work_hours(self) -> None:
        """Clock out automatically once the daily maximum is reached."""
        if self.state is WorkState.CLOCKED_OUT:
            return

        if self._elapsed(self._clock()) >= MAX_WORK_HOURS:
            self.clock_out(True)
            self.show_notification(
                "Auto Clock Out",
                "Automatic clock out after 10 hours! ⚠️\nFor your health and legal compliance.",
            )

    def update_menu_info(self) -> None:
        """Refresh the status lines of the context menu."""
        info = self.menu_info
        info.update_status(self.state)

        if self.state is WorkState.CLOCKED_OUT:
            info.update_working_time("00:00:00")
            info.update_next_break("--:--:--")
            info.update_remaining_time("08:00:00")
            return

        now = self._clock()
        worked = self._elapsed(now)

        if self.state is WorkState.ON_BREAK:
            break_time = now - (self.break_start_time or now)
            info.update_working_time(time_utils.format_time_countdown(worked - break_time))
        else:
            info.update_working_time(time_utils.format_time_countdown(worked))

        if not self.first_break_taken and worked < FIRST_BREAK_AFTER:
            info.update_next_break(time_utils.format_time_countdown(FIRST_BREAK_AFTER - worked))
        elif not self.second_break_taken and worked < SECOND_BREAK_AFTER:
            info.update_next_break(time_utils.format_time_countdown(SECOND_BREAK_AFTER - worked))
        else:
            info.update_next_break("No more breaks")

        net_worked = worked - time_utils.calculate_required_breaks(worked)
        remaining = TARGET_WORK - net_worked
        if remaining > timedelta(0):
            info.update_remaining_time(time_utils.format_time_countdown(remaining))
        else:
            info.update_remaining_time("00:00:00 (Overtime!)")

    def context_menu(self) -> list[MenuItem]:
        """Build the context menu for the current state."""
        items = [MenuItem(self.menu_info.status_text, enabled=False)]
        if self.state is not WorkState.CLOCKED_OUT:
            items += [
                MenuItem(self.menu_info.working_time_text, enabled=False),
                MenuItem(self.menu_info.next_break_text, enabled=False),
                MenuItem(self.menu_info.remaining_text, enabled=False),
            ]
        items.append(SEPARATOR)

        if self.state is WorkState.CLOCKED_OUT:
            items.append(MenuItem("🟢 Clock In", Command.CLOCK_IN))
        elif self.state is WorkState.CLOCKED_IN:
            items.append(MenuItem("🔴 Clock Out", Command.CLOCK_OUT))
            items.append(MenuItem("☕ Start Break", Command.START_BREAK))
        else:
            items.append(MenuItem("✅ End Break", Command.END_BREAK))
            items.append(MenuItem("🔴 Clock Out", Command.CLOCK_OUT))

        items += [
            SEPARATOR,
            MenuItem("📄 View Daily Log", Command.VIEW_LOG),
            MenuItem("📊 View Weekly Hours", Command.VIEW_WEEKLY),
            SEPARATOR,
            MenuItem("❌ Exit", Command.EXIT),
        ]
        return items

    def handle_tray_event(self, event: TrayEvent) -> list[MenuItem] | None:
        """React to the tray icon; returns the menu to show, if any."""
        if event in (TrayEvent.RIGHT_BUTTON_DOWN, TrayEvent.CONTEXT_MENU):
            return self.context_menu()
        if event is TrayEvent.LEFT_DOUBLE_CLICK:
            if self.state is WorkState.CLOCKED_OUT:
                self.clock_in()
            elif self.state is WorkState.CLOCKED_IN:
                self.clock_out()
            else:
                self.end_break()
        return None

    def handle_command(self, command: Command) -> None:
        """Carry out a menu command."""
        if command is Command.CLOCK_IN:
            self.clock_in()
        elif command is Command.CLOCK_OUT:
            self.clock_out()
        elif command is Command.START_BREAK:
            self.start_break()
        elif command is Command.END_BREAK:
            self.end_break()
        elif command is Command.VIEW_LOG:
            self.logger.open_time_log()
        elif command is Command.VIEW_WEEKLY:
            self.logger.open_weekly_log()
        elif command is Command.EXIT:
            self.quit_requested = True

    def handle_timer(self, timer_id: TimerId) -> None:
        """Run the check that belongs to a fired timer."""
        if timer_id is TimerId.AUTO_BREAK:
            self.check_automatic_breaks()
        elif timer_id is TimerId.MAX_HOURS:
            self.check_max_work_hours()
        elif timer_id is TimerId.STATUS_UPDATE:
            self.update_menu_info()

    def handle_session_event(self, event: SessionEvent) -> None:
        """Log a desktop session change; logging off ends the work session."""
        if event is SessionEvent.LOCK:
            self.logger.log_session_event("SCREEN LOCKED")
        elif event is SessionEvent.UNLOCK:
            self.logger.log_session_event("SCREEN UNLOCKED")
        elif event is SessionEvent.LOGOFF:
            self.logger.log_session_event("USER LOGOFF")
            if self.state is not WorkState.CLOCKED_OUT:
                self.clock_out(True)
        elif event is SessionEvent.LOGON:
            self.logger.log_session_event("USER LOGON")

    def cleanup(self) -> None:
        """Stop every running timer."""
        self._timers.clear()