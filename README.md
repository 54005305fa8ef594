# shifttally

A small work-time tracker for the terminal. You clock in, take breaks and
clock out. shifttally keeps plain-text logs of what happened and of how much
you worked each day.

## What it does

- **Clock in and clock out.** On clock-out the net work time is written to the
  time log and to the daily hours file.
- **Breaks.** You start and end breaks yourself. When a break ends, its length
  is logged.
- **Legal break rules.** After 6 hours of work a 30-minute break is due. After
  9 hours a further 15-minute break is due. You get one reminder for each. On
  clock-out the breaks that were due are taken off the net work time, and
  `AUTO BREAKS ADDED: ...` is logged.
- **Maximum hours.** After 10 hours you are clocked out automatically.
- **Status.** While you are clocked in, the menu shows:
  - the time worked;
  - a countdown to the next break, or "No more breaks";
  - the time left of an 8-hour day, or `00:00:00 (Overtime!)`.

## Log files

All files are plain text. They are written to the directory given with
`--dir`, which is the current directory by default.

| File               | Contents                                                                 |
|--------------------|--------------------------------------------------------------------------|
| `time_log.txt`     | `YYYY-MM-DD HH:MM:SS - ACTION` lines. Automatic entries are marked `[AUTO]`. |
| `weekly_hours.txt` | One line per day: `YYYY-MM-DD - Xh Ym` of net work time                   |
| `session_log.txt`  | Session events: `SCREEN LOCKED`, `SCREEN UNLOCKED`, `USER LOGON`, `USER LOGOFF` |

Each clock-out replaces today's line in `weekly_hours.txt`. The file
therefore always shows the latest net time for the day.

## Installation

```
pip install .
```

## Usage

```
shifttally [--dir DIRECTORY]
```

Type one command per line. Case, hyphens and underscores do not matter.

| Command                          | Effect                                               |
|----------------------------------|------------------------------------------------------|
| `in`, `clock in`                 | Clock in                                             |
| `out`, `clock out`               | Clock out                                            |
| `break`, `start break`           | Start a break (only while working)                   |
| `end break`, `resume`            | End the break                                        |
| `menu`, `status`                 | Print the status lines and the commands available now |
| `toggle`                         | Clock in, clock out, or end the break, depending on the state |
| `log`, `view log`                | Open `time_log.txt` in the system's default viewer    |
| `weekly`, `view weekly`          | Open `weekly_hours.txt` in the system's default viewer |
| `lock`, `unlock`, `logon`        | Write the session event to `session_log.txt`          |
| `logoff`                         | Write the event and clock out automatically           |
| `exit`, `quit`                   | Leave the tracker                                    |

The numeric command IDs `2001` to `2007` are accepted as well.

An unknown command prints `error: ...` and the tracker carries on. The
tracker stops when you type `exit` or when the input ends.

Notifications are printed as `Title: message`. Examples are the confirmations
on clock-in and clock-out, the break reminders and the automatic clock-out.
The reminder and maximum-hour checks run once a minute while the tracker is
open, including while it waits for input.

## Using it from Python

```python
from datetime import timedelta
from shifttally.time_utils import format_duration, calculate_required_breaks

worked = timedelta(hours=7)
breaks = calculate_required_breaks(worked)   # 30 minutes
print(format_duration(worked - breaks))      # "6h 30m"
```

- `shifttally.logger.TimeLogger(directory, clock)` writes the three log files.
- `shifttally.tracker.TimeTracker(logger, clock, notifier)` holds the state
  machine. It has `clock_in`, `clock_out`, `start_break`, `end_break`, the
  periodic checks, `context_menu()` and the `handle_*` event methods. Pass a
  `clock` callable to control time and a `notifier(title, message)` callable
  to receive notifications.
- `shifttally.cli.TimerLoop` fires the tracker's active timers when they are
  due.
- `shifttally.cli.run_session` drives a tracker from any iterable of command
  lines.

## What it does not do

- There is no system-tray icon or graphical menu. Everything happens on the
  terminal.
- Lock, unlock, logon and logoff are not detected from the desktop. You type
  them as commands.
- The clocked-in state is held in memory only. If you exit while clocked in,
  the session is not recorded.

## Running the tests

```
pip install .[test]
pytest
```