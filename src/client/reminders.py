"""Due-soon reminders, evaluated each time the list is loaded.

Reminders only fire while the client runs and are not de-duplicated
across loads.
"""

import logging
import sys
from datetime import datetime, timedelta
from typing import Protocol, TextIO

from client.state import TaskView

logger = logging.getLogger(__name__)

REMINDER_WINDOW = timedelta(minutes=10)


class Notifier(Protocol):
    def permission_granted(self) -> bool: ...
    def notify(self, title: str, body: str) -> None: ...


class ConsoleNotifier:
    """Prints reminders to a stream (stderr by default)."""

    def __init__(self, stream: TextIO | None = None, enabled: bool = True):
        self.stream = stream or sys.stderr
        self.enabled = enabled

    def permission_granted(self) -> bool:
        return self.enabled

    def notify(self, title: str, body: str) -> None:
        print(f"🔔 {title}: {body}", file=self.stream)


def due_soon(tasks: list[TaskView], now: datetime, window: timedelta = REMINDER_WINDOW) -> list[TaskView]:
    """Not-done tasks due strictly between now and now + window."""
    return [
        t for t in tasks
        if not t.done and t.due_date is not None and now < t.due_date < now + window
    ]


def schedule_reminders(tasks: list[TaskView], notifier: Notifier, now: datetime) -> list[TaskView]:
    """Notify for every due-soon task. Returns the tasks notified."""
    if not notifier.permission_granted():
        return []

    fired = due_soon(tasks, now)
    for task in fired:
        due = task.due_date.astimezone().strftime("%Y-%m-%d %H:%M")
        notifier.notify("Task Reminder", f"{task.text} is due soon ({due})")
    if fired:
        logger.debug("Reminders fired", extra={"count": len(fired)})
    return fired
