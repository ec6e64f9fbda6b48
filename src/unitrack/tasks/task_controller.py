# src/unitrack/tasks/task_controller.py

from __future__ import annotations

"""
Task lifecycle controller.

The only component allowed to mutate the TaskStore. Every mutation is applied to the
in-memory sequence first and then written through to storage; a failed write is
reported in the returned Outcome, never raised.

Edit mode is a two-state machine:
  IDLE --begin_edit(id)--> EDITING(id)
  EDITING(id) --commit_edit / cancel_edit / delete(id)--> IDLE
Operations on any other id leave EDITING(id) untouched.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime

from ..core.ports import Clock, TaskRepo
from .task_models import FilterMode, Task, TaskFields, TaskPatch
from .task_query import filter_tasks
from .task_stats import TaskStats, compute_stats

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, frozen=True)
class Outcome:
    """
    Result of a mutating operation.

    - task: the affected task (after the change; the removed task for delete), or None
    - changed: whether the in-memory model changed
    - persisted: whether storage is in sync (True when nothing had to be written)
    """

    task: Task | None
    changed: bool
    persisted: bool = True


NOT_FOUND = Outcome(task=None, changed=False)


class TaskController:
    def __init__(self, store: TaskRepo, *, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock
        self._editing_task_id: int | None = None
        self._last_issued_id = 0

    @property
    def editing_task_id(self) -> int | None:
        return self._editing_task_id

    @property
    def is_editing(self) -> bool:
        return self._editing_task_id is not None

    # ---- ids ----

    def _allocate_id(self, now: datetime) -> int:
        """
        Millisecond timestamp, bumped past every id issued or stored so far.

        Keeps ids compatible with the time-derived ids of existing data while
        guaranteeing uniqueness under rapid creation and after deletions.
        """
        now_ms = int(now.timestamp() * 1000)
        new_id = max(now_ms, self._last_issued_id + 1, self._store.max_id() + 1)
        self._last_issued_id = new_id
        return new_id

    def _persist(self, op: str, task_id: int) -> bool:
        ok = self._store.persist()
        if not ok:
            logger.error("Persist failed after %s task_id=%s", op, task_id)
        return ok

    # ---- lifecycle ----

    def create(self, fields: TaskFields) -> Outcome:
        if not fields.title.strip():
            raise ValueError("title is required")

        # createdAt is stored with millisecond precision.
        now = self._clock()
        now = now.replace(microsecond=now.microsecond // 1000 * 1000)
        task = Task(
            id=self._allocate_id(now),
            title=fields.title,
            subject=fields.subject,
            date=fields.date,
            priority=fields.priority,
            description=fields.description,
            completed=False,
            created_at=now,
        )
        self._store.insert_front(task)
        logger.info("Task created id=%s date=%s priority=%s", task.id, task.date, task.priority)
        return Outcome(task=task, changed=True, persisted=self._persist("create", task.id))

    def begin_edit(self, task_id: int) -> Task | None:
        task = self._store.find_by_id(task_id)
        if task is None:
            logger.debug("begin_edit ignored: unknown task_id=%s", task_id)
            return None
        self._editing_task_id = task_id
        logger.debug("Editing task_id=%s", task_id)
        return task

    def commit_edit(self, task_id: int, fields: TaskFields) -> Outcome:
        try:
            updated = self._store.replace(task_id, TaskPatch.from_fields(fields))
        finally:
            self._editing_task_id = None

        if updated is None:
            logger.debug("commit_edit ignored: unknown task_id=%s", task_id)
            return NOT_FOUND

        logger.info("Task updated id=%s", task_id)
        return Outcome(task=updated, changed=True, persisted=self._persist("edit", task_id))

    def cancel_edit(self) -> None:
        if self._editing_task_id is not None:
            logger.debug("Edit cancelled task_id=%s", self._editing_task_id)
        self._editing_task_id = None

    def submit(self, fields: TaskFields) -> Outcome:
        """Form submit: commit the pending edit if there is one, create otherwise."""
        if self._editing_task_id is not None:
            return self.commit_edit(self._editing_task_id, fields)
        return self.create(fields)

    def toggle_completion(self, task_id: int) -> Outcome:
        task = self._store.find_by_id(task_id)
        if task is None:
            logger.debug("toggle_completion ignored: unknown task_id=%s", task_id)
            return NOT_FOUND

        updated = self._store.replace(task_id, TaskPatch(completed=not task.completed))
        logger.info("Task id=%s completed=%s", task_id, not task.completed)
        return Outcome(task=updated, changed=True, persisted=self._persist("toggle", task_id))

    def delete(self, task_id: int) -> Outcome:
        task = self._store.find_by_id(task_id)
        if task is None or not self._store.remove_by_id(task_id):
            logger.debug("delete ignored: unknown task_id=%s", task_id)
            return NOT_FOUND

        if self._editing_task_id == task_id:
            self.cancel_edit()

        logger.info("Task deleted id=%s", task_id)
        return Outcome(task=task, changed=True, persisted=self._persist("delete", task_id))

    # ---- read-only views ----

    def tasks(self, mode: FilterMode | str, today: date | datetime) -> list[Task]:
        return filter_tasks(self._store.get_all(), mode, today)

    def stats(self, today: date | datetime) -> TaskStats:
        return compute_stats(self._store.get_all(), today)
