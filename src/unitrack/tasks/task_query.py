# src/unitrack/tasks/task_query.py

from __future__ import annotations

"""
Read-only views over a task sequence.

Everything here takes "today" (or "now") as an argument; nothing reads the wall clock.
"""

import math
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from .task_models import FilterMode, Priority, Task

END_OF_DAY = time(23, 59, 59, 999000)
ONE_DAY_SECONDS = timedelta(days=1).total_seconds()


def as_date(value: date | datetime) -> date:
    # datetime is a subclass of date; comparing the two raises TypeError.
    if isinstance(value, datetime):
        return value.date()
    return value


def is_overdue(task: Task, today: date | datetime) -> bool:
    return not task.completed and task.date < as_date(today)


def filter_tasks(
    tasks: Iterable[Task], mode: FilterMode | str, today: date | datetime
) -> list[Task]:
    """Return the tasks matching `mode`, in input order."""
    mode = FilterMode.parse(mode)
    today = as_date(today)

    if mode is FilterMode.PENDING:
        return [t for t in tasks if not t.completed]
    if mode is FilterMode.COMPLETED:
        return [t for t in tasks if t.completed]
    if mode is FilterMode.OVERDUE:
        return [t for t in tasks if is_overdue(t, today)]
    if mode is FilterMode.HIGH_PRIORITY:
        return [t for t in tasks if t.priority is Priority.HIGH]
    return list(tasks)


def days_until_due(task: Task, now: date | datetime) -> int:
    """
    Whole days from `now` until the end of the task's due date, rounded up.

    The due date counts until 23:59:59.999 in `now`'s timezone (naive `now` = naive local).
    A bare date for `now` means midnight of that date.
    """
    if not isinstance(now, datetime):
        now = datetime.combine(now, time.min)
    due = datetime.combine(task.date, END_OF_DAY, tzinfo=now.tzinfo)
    return math.ceil((due - now).total_seconds() / ONE_DAY_SECONDS)


def due_label(days: int) -> str:
    if days < 0:
        n = abs(days)
        return f"{n} day{'s' if n != 1 else ''} ago"
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    return f"in {days} days"
