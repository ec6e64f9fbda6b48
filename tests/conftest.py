# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from unitrack.cli.bootstrap import create_initial_state
from unitrack.core.state import AppState
from unitrack.tasks.task_controller import TaskController
from unitrack.tasks.task_store import TaskStore

from .fakes import FixedClock, InMemoryStorage


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="unitrack-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.sqlite3",
        storage_key="universityTasks",
        confirm_delete=True,
        default_filter="all",
    )


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def store(storage: InMemoryStorage) -> TaskStore:
    s = TaskStore(storage)
    s.load()
    return s


@pytest.fixture()
def controller(store: TaskStore, clock: FixedClock) -> TaskController:
    return TaskController(store, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired through the real bootstrap.

    NOTE: we keep the real SQLite storage here because the full
    command -> controller -> disk path is part of what we want to test.
    """
    return create_initial_state(settings=settings)

