# tests/test_task_stats.py

from __future__ import annotations

import itertools
from datetime import date

from unitrack.tasks.task_stats import TaskStats, compute_stats

from .fakes import make_task


def test_stats_counts() -> None:
    tasks = [
        make_task(1, due="2024-01-01"),
        make_task(2, due="2024-01-01", completed=True),
        make_task(3, due="2099-01-01"),
        make_task(4, due="2024-05-31"),
    ]
    assert compute_stats(tasks, date(2024, 6, 1)) == TaskStats(
        total=4, pending=3, completed=1, overdue=2
    )


def test_stats_empty() -> None:
    assert compute_stats([], date(2024, 6, 1)) == TaskStats(0, 0, 0, 0)


def test_single_overdue_task_scenario() -> None:
    stats = compute_stats([make_task(1, due="2024-01-01")], date(2024, 6, 1))
    assert stats.overdue == 1


def test_stats_invariants_hold_for_every_combination() -> None:
    dues = ["2024-05-01", "2024-06-01", "2024-07-01"]
    today = date(2024, 6, 1)
    for flags in itertools.product([False, True], repeat=len(dues)):
        tasks = [
            make_task(i, due=due, completed=done)
            for i, (due, done) in enumerate(zip(dues, flags, strict=True))
        ]
        s = compute_stats(tasks, today)
        assert s.pending + s.completed == s.total
        assert s.overdue <= s.pending
