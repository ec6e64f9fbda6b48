# src/unitrack/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage swappable and makes testing easier.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

Clock = Callable[[], datetime]
# Returns the current instant (aware, UTC). Injected so tests can freeze time.


class KeyValueStorage(Protocol):
    """
    Durable local key-value storage.

    - get: stored bytes, or None when absent
    - set: overwrite; True on success, False on failure (never raises for I/O errors)
    """

    def get(self, key: str) -> bytes | None: ...
    def set(self, key: str, value: bytes) -> bool: ...


class TaskRepo(Protocol):
    """What the lifecycle controller needs from the task store."""

    def load(self) -> None: ...
    def get_all(self) -> tuple[Any, ...]: ...
    def insert_front(self, task: Any) -> None: ...
    def find_by_id(self, task_id: int) -> Any | None: ...
    def replace(self, task_id: int, patch: Any) -> Any | None: ...
    def remove_by_id(self, task_id: int) -> bool: ...
    def persist(self) -> bool: ...
    def count(self) -> int: ...
    def max_id(self) -> int: ...
