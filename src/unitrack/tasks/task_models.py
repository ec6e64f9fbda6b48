# src/unitrack/tasks/task_models.py

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    """
    Task priority.

    Notes:
    - records written by the original Spanish UI use "baja" / "media" / "alta";
      those are accepted as aliases everywhere a priority is parsed.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Priority | str) -> Priority:
        """Strict parse for user input. Raises ValueError on unknown values."""
        if isinstance(raw, Priority):
            return raw
        key = str(raw or "").strip().lower()
        key = _PRIORITY_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown priority: {raw!r} (expected low, medium or high)") from None

    @classmethod
    def from_record(cls, raw: Any) -> Priority:
        """Lenient parse for stored data: anything unknown becomes MEDIUM."""
        try:
            return cls.parse(raw)
        except ValueError:
            return cls.MEDIUM


_PRIORITY_ALIASES: dict[str, str] = {
    "baja": "low",
    "media": "medium",
    "alta": "high",
}


class FilterMode(StrEnum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    HIGH_PRIORITY = "high_priority"

    @classmethod
    def parse(cls, raw: FilterMode | str) -> FilterMode:
        if isinstance(raw, FilterMode):
            return raw
        key = str(raw or "").strip().lower().replace("-", "_")
        key = _FILTER_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown filter: {raw!r} (expected one of: {choices})") from None


# "alta" is the data-filter value used by the original UI.
_FILTER_ALIASES: dict[str, str] = {
    "alta": "high_priority",
    "high": "high_priority",
    "done": "completed",
}


def parse_due_date(raw: date | str) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw or "").strip()
    if not text:
        raise ValueError("date is required")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValueError(f"invalid date: {raw!r} (expected YYYY-MM-DD)") from None


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    ts = datetime.fromisoformat(raw)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


@dataclass(slots=True, frozen=True)
class TaskFields:
    """The five user-editable fields, as submitted by a form or command."""

    title: str
    subject: str
    date: date
    priority: Priority
    description: str = ""

    @classmethod
    def build(
        cls,
        *,
        title: str,
        subject: str,
        date: date | str,
        priority: Priority | str,
        description: str | None = "",
    ) -> TaskFields:
        title = (title or "").strip()
        if not title:
            raise ValueError("title is required")
        return cls(
            title=title,
            subject=(subject or "").strip(),
            date=parse_due_date(date),
            priority=Priority.parse(priority),
            description=(description or "").strip(),
        )


@dataclass(slots=True, frozen=True)
class TaskPatch:
    """Replacement values for a task's mutable fields. None keeps the current value."""

    title: str | None = None
    subject: str | None = None
    date: date | None = None
    priority: Priority | None = None
    description: str | None = None
    completed: bool | None = None

    @classmethod
    def from_fields(cls, fields: TaskFields) -> TaskPatch:
        return cls(
            title=fields.title,
            subject=fields.subject,
            date=fields.date,
            priority=fields.priority,
            description=fields.description,
        )


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    title: str
    subject: str
    date: date
    priority: Priority
    description: str
    completed: bool
    created_at: datetime

    def to_record(self) -> dict[str, Any]:
        """Persisted layout; key names match the original stored blob."""
        return {
            "id": self.id,
            "title": self.title,
            "subject": self.subject,
            "date": self.date.isoformat(),
            "priority": self.priority.value,
            "description": self.description,
            "completed": self.completed,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_record(cls, raw: dict[str, Any]) -> Task:
        """
        Build a Task from a stored record.

        Raises ValueError (or TypeError) when the record cannot describe a task:
        missing, non-finite or non-integer id, empty title, unparsable date.
        """
        tid = raw.get("id")
        if (
            isinstance(tid, bool)
            or not isinstance(tid, int | float)
            or not math.isfinite(tid)
            or int(tid) != tid
        ):
            raise ValueError(f"invalid task id: {tid!r}")

        title = str(raw.get("title") or "").strip()
        if not title:
            raise ValueError(f"task {tid} has no title")

        created_raw = raw.get("createdAt")
        try:
            created_at = parse_timestamp(str(created_raw))
        except (TypeError, ValueError):
            # Records without a usable timestamp fall back to the epoch rather than "now",
            # so createdAt stays stable across reloads.
            created_at = datetime.fromtimestamp(0, UTC)

        return cls(
            id=int(tid),
            title=title,
            subject=str(raw.get("subject") or ""),
            date=parse_due_date(raw.get("date") or ""),
            priority=Priority.from_record(raw.get("priority")),
            description=str(raw.get("description") or ""),
            completed=raw.get("completed") is True,
            created_at=created_at,
        )
