# src/unitrack/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage, task store and controller into AppState,
- loads persisted tasks.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Clock, KeyValueStorage
from ..core.state import AppState
from ..storage.kv_store import SqliteKeyValueStorage
from ..tasks.task_controller import TaskController, utc_now
from ..tasks.task_models import FilterMode
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def _initial_filter(settings) -> FilterMode:
    raw = getattr(settings, "default_filter", "all")
    try:
        return FilterMode.parse(raw)
    except ValueError:
        logger.warning("Unknown default filter %r; using 'all'.", raw)
        return FilterMode.ALL


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStorage | None = None,
    clock: Clock = utc_now,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and storage injectable makes the app easier to test and avoids
    hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = SqliteKeyValueStorage(settings.storage_path)

    store = TaskStore(storage, key=settings.storage_key)
    store.load()

    return AppState(
        settings=settings,
        store=store,
        controller=TaskController(store, clock=clock),
        current_filter=_initial_filter(settings),
    )
