# src/unitrack/tasks/task_stats.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from .task_models import Task
from .task_query import as_date, is_overdue


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    pending: int
    completed: int
    overdue: int


def compute_stats(tasks: Iterable[Task], today: date | datetime) -> TaskStats:
    today = as_date(today)
    total = pending = completed = overdue = 0
    for t in tasks:
        total += 1
        if t.completed:
            completed += 1
            continue
        pending += 1
        if is_overdue(t, today):
            overdue += 1
    return TaskStats(total=total, pending=pending, completed=completed, overdue=overdue)
