# src/unitrack/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_controller import TaskController
from ..tasks.task_models import FilterMode
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in command handlers.
    settings: object

    store: TaskStore
    controller: TaskController

    # Presentation-only state: which view the console shows by default.
    current_filter: FilterMode = FilterMode.ALL
