# src/study_planner/tasks/task_models.py

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Priority(StrEnum):
    """Task priority as stored in the durable record ("High" / "Medium" / "Low")."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def from_raw(cls, raw: Any) -> Priority:
        if isinstance(raw, cls):
            return raw
        if not raw:
            return cls.MEDIUM
        s = str(raw).strip().lower()
        for p in cls:
            if p.value.lower() == s:
                return p
        return cls.MEDIUM

    @property
    def rank(self) -> int:
        """Sort rank: High first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


def new_task_id() -> str:
    return uuid.uuid4().hex


def utc_now_iso(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a trailing Z."""
    dt = (now or datetime.now(UTC)).astimezone(UTC)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 date or timestamp into an aware datetime.

    - "2025-09-10"               -> midnight UTC
    - "2025-09-10T20:00:00Z"     -> as given
    - "2025-09-10T20:00"         -> local time

    Anything else (empty, wrong type, garbage) returns None; callers treat
    that as "no date".
    """
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None
    try:
        if _DATE_ONLY_RE.match(s):
            d = date.fromisoformat(s)
            return datetime(d.year, d.month, d.day, tzinfo=UTC)
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    created_at: str

    description: str = ""
    due_date: str = ""
    priority: Priority = Priority.MEDIUM
    subject: str = ""

    completed: bool = False
    completed_at: str | None = None

    @property
    def due(self) -> datetime | None:
        return parse_timestamp(self.due_date)

    @property
    def created(self) -> datetime | None:
        return parse_timestamp(self.created_at)

    @property
    def finished(self) -> datetime | None:
        return parse_timestamp(self.completed_at)

    def is_overdue(self, now: datetime) -> bool:
        if self.completed:
            return False
        due = self.due
        return due is not None and due < now

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date,
            "priority": self.priority.value,
            "subject": self.subject,
            "completed": self.completed,
            "createdAt": self.created_at,
        }
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        return out

    @classmethod
    def from_dict(cls, raw: Any) -> Task | None:
        """
        Build a Task from one entry of the durable record.

        The record has no schema version, so every field is optional except
        a string title. Returns None for entries that cannot be used.
        """
        if not isinstance(raw, Mapping):
            return None

        title = raw.get("title")
        if not isinstance(title, str):
            return None

        raw_id = raw.get("id")
        task_id = str(raw_id) if isinstance(raw_id, (str, int)) and str(raw_id) else new_task_id()

        created_at = _str_or_empty(raw.get("createdAt"))
        completed = raw.get("completed") is True

        completed_at: str | None = None
        if completed:
            completed_at = _str_or_empty(raw.get("completedAt")) or created_at or utc_now_iso()

        return cls(
            id=task_id,
            title=title,
            created_at=created_at,
            description=_str_or_empty(raw.get("description")),
            due_date=_str_or_empty(raw.get("dueDate")),
            priority=Priority.from_raw(raw.get("priority")),
            subject=_str_or_empty(raw.get("subject")),
            completed=completed,
            completed_at=completed_at,
        )


def _str_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""
