# src/unitrack/tasks/task_store.py

from __future__ import annotations

import json
import logging
from dataclasses import replace as dc_replace

from ..core.ports import KeyValueStorage
from .task_models import Task, TaskPatch

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "universityTasks"


class TaskStore:
    """
    Ordered task sequence backed by a single key in durable storage.

    Ordering:
    - new tasks are prepended (most recently created first)
    - replace() keeps the position; only insert_front/remove_by_id change the sequence

    Persistence:
    - persist() serializes the whole sequence as a JSON array and overwrites the key
    - load() treats an absent or malformed blob as an empty sequence
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._tasks: list[Task] = []

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- persistence ----

    def load(self) -> None:
        """Replace the in-memory sequence with what storage holds. Never raises."""
        self._tasks = []

        try:
            blob = self._storage.get(self._key)
        except Exception:
            logger.exception("TaskStore read failed key=%s; starting empty.", self._key)
            return

        if blob is None:
            logger.info("TaskStore loaded key=%s total=0 (no stored data)", self._key)
            return

        try:
            data = json.loads(blob)
        except (UnicodeDecodeError, ValueError, RecursionError):
            logger.warning("TaskStore key=%s holds malformed JSON; starting empty.", self._key)
            return

        if not isinstance(data, list):
            logger.warning(
                "TaskStore key=%s holds %s instead of a list; starting empty.",
                self._key,
                type(data).__name__,
            )
            return

        seen: set[int] = set()
        skipped = 0
        for raw in data:
            if not isinstance(raw, dict):
                skipped += 1
                continue
            try:
                task = Task.from_record(raw)
            except (TypeError, ValueError, OverflowError) as e:
                logger.warning("TaskStore skipping malformed record: %s", e)
                skipped += 1
                continue
            if task.id in seen:
                logger.warning("TaskStore skipping duplicate id=%s", task.id)
                skipped += 1
                continue
            seen.add(task.id)
            self._tasks.append(task)

        logger.info(
            "TaskStore loaded key=%s total=%d skipped=%d", self._key, len(self._tasks), skipped
        )

    def persist(self) -> bool:
        """
        Write the full sequence to storage (overwrite, not append).

        Returns False when the write failed so the caller can tell the user;
        the in-memory sequence is kept either way.
        """
        payload = json.dumps(
            [t.to_record() for t in self._tasks], ensure_ascii=False
        ).encode("utf-8")

        try:
            ok = bool(self._storage.set(self._key, payload))
        except Exception:
            logger.exception("TaskStore write failed key=%s", self._key)
            return False

        if ok:
            logger.debug("TaskStore persisted key=%s total=%d", self._key, len(self._tasks))
        else:
            logger.error("TaskStore persist failed key=%s total=%d", self._key, len(self._tasks))
        return ok

    # ---- queries ----

    def get_all(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def find_by_id(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def count(self) -> int:
        return len(self._tasks)

    def max_id(self) -> int:
        return max((t.id for t in self._tasks), default=0)

    def _index_of(self, task_id: int) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    # ---- mutations ----

    def insert_front(self, task: Task) -> None:
        if self._index_of(task.id) is not None:
            raise ValueError(f"duplicate task id: {task.id}")
        self._tasks.insert(0, task)

    def replace(self, task_id: int, patch: TaskPatch) -> Task | None:
        """
        Apply `patch` to the task with `task_id`, keeping id, created_at and position.

        Returns the updated task, or None when no task matches (no-op).
        """
        idx = self._index_of(task_id)
        if idx is None:
            return None

        current = self._tasks[idx]
        changes = {
            name: getattr(patch, name)
            for name in ("title", "subject", "date", "priority", "description", "completed")
            if getattr(patch, name) is not None
        }
        updated = dc_replace(current, **changes)
        self._tasks[idx] = updated
        return updated

    def remove_by_id(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False
        del self._tasks[idx]
        return True
