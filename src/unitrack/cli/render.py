# src/unitrack/cli/render.py

from __future__ import annotations

"""
Plain-text rendering for the console presentation layer.

Pure functions: they receive tasks/stats plus "now" and return strings.
"""

from datetime import date, datetime

from ..tasks.task_models import FilterMode, Priority, Task
from ..tasks.task_query import as_date, days_until_due, due_label, is_overdue
from ..tasks.task_stats import TaskStats

EMPTY_STATES: dict[FilterMode, tuple[str, str]] = {
    FilterMode.ALL: ("No tasks yet", "Start by adding your first assignment."),
    FilterMode.PENDING: ("No pending tasks", "Great! You have finished all your tasks."),
    FilterMode.COMPLETED: ("No completed tasks", "You have not completed any task yet."),
    FilterMode.OVERDUE: ("No overdue tasks", "Excellent! Nothing is late."),
    FilterMode.HIGH_PRIORITY: ("No high-priority tasks", "You have no tasks marked high."),
}

_PRIORITY_BADGE: dict[Priority, str] = {
    Priority.LOW: "LOW",
    Priority.MEDIUM: "MED",
    Priority.HIGH: "HIGH",
}


def format_due_date(d: date) -> str:
    return f"{d.day} {d.strftime('%B %Y')}"


def render_task(task: Task, now: date | datetime) -> str:
    mark = "x" if task.completed else " "
    flags = " OVERDUE" if is_overdue(task, as_date(now)) else ""
    label = due_label(days_until_due(task, now))
    lines = [
        f"[{mark}] #{task.id} {task.title} ({_PRIORITY_BADGE[task.priority]}){flags}",
        f"      {task.subject or '-'} | due {format_due_date(task.date)} ({label})",
    ]
    if task.description:
        lines.append(f"      {task.description}")
    return "\n".join(lines)


def render_task_list(tasks: list[Task], mode: FilterMode, now: date | datetime) -> str:
    if not tasks:
        title, message = EMPTY_STATES.get(mode, ("No tasks", "Try another filter."))
        return f"{title}\n  {message}"
    header = f"{mode.value} ({len(tasks)}):"
    return "\n".join([header, *(render_task(t, now) for t in tasks)])


def render_stats(stats: TaskStats) -> str:
    return (
        f"Total: {stats.total}  Pending: {stats.pending}  "
        f"Completed: {stats.completed}  Overdue: {stats.overdue}"
    )


def render_task_detail(task: Task) -> str:
    return "\n".join(
        [
            f"#{task.id}",
            f"  title:       {task.title}",
            f"  subject:     {task.subject}",
            f"  date:        {task.date.isoformat()}",
            f"  priority:    {task.priority.value}",
            f"  description: {task.description}",
            f"  completed:   {'yes' if task.completed else 'no'}",
            f"  created:     {task.created_at.astimezone():%Y-%m-%d %H:%M}",
        ]
    )
