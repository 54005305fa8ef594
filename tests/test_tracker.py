from datetime import datetime, timedelta

import pytest

from shifttally import time_utils
from shifttally.logger import TimeLogger
from shifttally.models import WorkState
from shifttally.tracker import (
    Command,
    MenuInfo,
    SessionEvent,
    TimerId,
    TimeTracker,
    TrayEvent,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 3, 4, 8, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingLogger:
    def __init__(self) -> None:
        self.opened = []

    def log_time_entry(self, action, is_automatic=False):
        pass

    def log_session_event(self, action):
        pass

    def update_weekly_hours(self, work_duration):
        pass

    def open_time_log(self):
        self.opened.append("time")

    def open_weekly_log(self):
        self.opened.append("weekly")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notes():
    return []


@pytest.fixture
def tracker(tmp_path, clock, notes):
    logger = TimeLogger(tmp_path, clock=clock)
    return TimeTracker(logger, clock, lambda title, message: notes.append((title, message)))


def read(path):
    return path.read_text(encoding="utf-8") if path.exists() else ""


def test_initial_state(tracker):
    assert tracker.state is WorkState.CLOCKED_OUT
    assert tracker.tooltip() == "Time Tracker - Clocked OUT"
    assert tracker.menu_info == MenuInfo()
    assert tracker.active_timers == frozenset()


def test_menu_info_defaults_and_updates():
    info = MenuInfo()
    assert info.remaining_text == "⏳ Remaining: 08:00:00"
    info.update_status(WorkState.ON_BREAK)
    assert info.status_text == "🟡 Status: On Break"
    info.update_next_break("01:02:03")
    assert info.next_break_text == "☕ Next Break: 01:02:03"


def test_clock_in(tracker, notes):
    tracker.clock_in()
    assert tracker.state is WorkState.CLOCKED_IN
    assert tracker.tooltip() == "Working"
    assert tracker.active_timers == frozenset(TimerId)
    assert notes == [("Time Tracker", "Successfully clocked in! 🟢")]
    assert "2024-03-04 08:00:00 - CLOCK IN\n" in read(tracker.logger.time_log_path)


def test_automatic_clock_in_is_marked_and_silent(tracker, notes):
    tracker.clock_in(True)
    assert "[AUTO] CLOCK IN" in read(tracker.logger.time_log_path)
    assert notes == []


def test_clock_out_deducts_required_breaks(tracker, clock, notes):
    tracker.clock_in()
    clock.advance(hours=7)
    tracker.clock_out()
    net = time_utils.format_duration(timedelta(hours=6, minutes=30))
    log = read(tracker.logger.time_log_path)
    assert "[AUTO] AUTO BREAKS ADDED: " + time_utils.format_duration(timedelta(minutes=30)) in log
    assert "CLOCK OUT - Net Work Time: " + net in log
    assert read(tracker.logger.weekly_log_path) == f"2024-03-04 - {net}\n"
    assert tracker.state is WorkState.CLOCKED_OUT
    assert tracker.active_timers == frozenset()
    assert notes[-1] == ("Time Tracker", "Successfully clocked out! 🔴\nNet work time: " + net)


def test_short_session_has_no_auto_breaks(tracker, clock):
    tracker.clock_in()
    clock.advance(hours=2)
    tracker.clock_out()
    assert "AUTO BREAKS ADDED" not in read(tracker.logger.time_log_path)


def test_clock_out_when_clocked_out_does_nothing(tracker, notes):
    tracker.clock_out()
    assert read(tracker.logger.time_log_path) == ""
    assert notes == []


def test_break_cycle(tracker, clock, notes):
    tracker.start_break()
    assert tracker.state is WorkState.CLOCKED_OUT
    tracker.clock_in()
    tracker.start_break()
    assert tracker.state is WorkState.ON_BREAK
    assert tracker.tooltip() == "On Break"
    clock.advance(minutes=20)
    tracker.end_break()
    duration = time_utils.format_duration(timedelta(minutes=20))
    assert tracker.state is WorkState.CLOCKED_IN
    assert notes[-1] == ("Time Tracker", "Break ended! ✅\nBreak duration: " + duration)
    assert "BREAK END - Duration: " + duration in read(tracker.logger.time_log_path)


def test_break_reminders_fire_once(tracker, clock, notes):
    tracker.clock_in(True)
    assert tracker.last_notification is None
    clock.advance(hours=6)
    tracker.check_automatic_breaks()
    assert tracker.last_notification[0] == "Break Reminder"
    tracker.check_automatic_breaks()
    assert [title for title, _ in notes] == ["Break Reminder"]
    assert tracker.state is WorkState.CLOCKED_IN
    clock.advance(hours=3)
    tracker.check_automatic_breaks()
    assert tracker.last_notification[0] == "Second Break Reminder"
    assert [title for title, _ in notes] == ["Break Reminder", "Second Break Reminder"]


def test_max_hours_auto_clock_out(tracker, clock, notes):
    tracker.clock_in(True)
    clock.advance(hours=9, minutes=59)
    tracker.handle_timer(TimerId.MAX_HOURS)
    assert tracker.state is WorkState.CLOCKED_IN
    clock.advance(minutes=1)
    tracker.handle_timer(TimerId.MAX_HOURS)
    assert tracker.state is WorkState.CLOCKED_OUT
    assert notes[-1][0] == "Auto Clock Out"
    assert "[AUTO] CLOCK OUT" in read(tracker.logger.time_log_path)


def test_menu_info_while_working(tracker, clock):
    tracker.clock_in()
    clock.advance(hours=1)
    tracker.handle_timer(TimerId.STATUS_UPDATE)
    info = tracker.menu_info
    assert info.status_text == "🟢 Status: Working"
    assert info.working_time_text == "⏰ Working: " + time_utils.format_time_countdown(timedelta(hours=1))
    assert info.next_break_text == "☕ Next Break: " + time_utils.format_time_countdown(timedelta(hours=5))
    assert info.remaining_text == "⏳ Remaining: " + time_utils.format_time_countdown(timedelta(hours=7))


def test_menu_info_overtime(tracker, clock):
    tracker.clock_in()
    clock.advance(hours=9, minutes=30)
    tracker.update_menu_info()
    assert tracker.menu_info.next_break_text == "☕ Next Break: No more breaks"
    assert tracker.menu_info.remaining_text == "⏳ Remaining: 00:00:00 (Overtime!)"


def test_menu_info_on_break_excludes_break_time(tracker, clock):
    tracker.clock_in()
    clock.advance(hours=2)
    tracker.start_break()
    clock.advance(minutes=10)
    tracker.update_menu_info()
    expected = time_utils.format_time_countdown(timedelta(hours=2))
    assert tracker.menu_info.working_time_text == "⏰ Working: " + expected


def test_context_menu_commands_per_state(tracker):
    def commands():
        return [item.command for item in tracker.context_menu() if item.command is not None]

    tail = [Command.VIEW_LOG, Command.VIEW_WEEKLY, Command.EXIT]
    assert commands() == [Command.CLOCK_IN] + tail
    tracker.clock_in()
    assert commands() == [Command.CLOCK_OUT, Command.START_BREAK] + tail
    tracker.start_break()
    assert commands() == [Command.END_BREAK, Command.CLOCK_OUT] + tail
    info_lines = [item for item in tracker.context_menu() if not item.enabled and not item.separator]
    assert len(info_lines) == 4


def test_tray_events(tracker):
    menu = tracker.handle_tray_event(TrayEvent.RIGHT_BUTTON_DOWN)
    assert menu == tracker.context_menu()
    assert tracker.handle_tray_event(TrayEvent.LEFT_DOUBLE_CLICK) is None
    assert tracker.state is WorkState.CLOCKED_IN
    tracker.start_break()
    tracker.handle_tray_event(TrayEvent.LEFT_DOUBLE_CLICK)
    assert tracker.state is WorkState.CLOCKED_IN
    tracker.handle_tray_event(TrayEvent.LEFT_DOUBLE_CLICK)
    assert tracker.state is WorkState.CLOCKED_OUT


def test_commands_dispatch(clock):
    logger = RecordingLogger()
    tracker = TimeTracker(logger, clock)
    tracker.handle_command(Command.VIEW_LOG)
    tracker.handle_command(Command.VIEW_WEEKLY)
    assert logger.opened == ["time", "weekly"]
    tracker.handle_command(Command.CLOCK_IN)
    assert tracker.state is WorkState.CLOCKED_IN
    assert tracker.last_notification == ("Time Tracker", "Successfully clocked in! 🟢")
    assert tracker.quit_requested is False
    tracker.handle_command(Command.EXIT)
    assert tracker.quit_requested is True


def test_session_events(tracker, notes):
    tracker.handle_session_event(SessionEvent.LOCK)
    tracker.handle_session_event(SessionEvent.UNLOCK)
    tracker.clock_in()
    tracker.handle_session_event(SessionEvent.LOGOFF)
    tracker.handle_session_event(SessionEvent.LOGON)
    lines = read(tracker.logger.session_log_path).splitlines()
    assert [line.split(" - ", 1)[1] for line in lines] == [
        "SCREEN LOCKED",
        "SCREEN UNLOCKED",
        "USER LOGOFF",
        "USER LOGON",
    ]
    assert tracker.state is WorkState.CLOCKED_OUT
    assert "[AUTO] CLOCK OUT" in read(tracker.logger.time_log_path)


def test_timer_intervals_and_cleanup(tracker):
    assert TimerId.STATUS_UPDATE.interval == timedelta(seconds=1)
    assert TimerId.AUTO_BREAK.interval == TimerId.MAX_HOURS.interval == timedelta(minutes=1)
    tracker.clock_in()
    tracker.cleanup()
    assert tracker.active_timers == frozenset()