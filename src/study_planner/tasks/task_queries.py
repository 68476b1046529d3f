# src/study_planner/tasks/task_queries.py

"""
Read-only views over a task snapshot (list and calendar screens).

Nothing here mutates tasks; every function takes a snapshot and returns
new lists. Unparseable due dates are treated as "no date".
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from .task_models import Task

STATUS_FILTERS = ("all", "active", "completed")
SORT_KEYS = ("date", "priority", "title")


class TaskStatus(StrEnum):
    COMPLETED = "completed"
    OVERDUE = "overdue"
    IN_PROGRESS = "in_progress"


def filter_tasks(tasks: Iterable[Task], status: str = "all") -> list[Task]:
    if status == "active":
        return [t for t in tasks if not t.completed]
    if status == "completed":
        return [t for t in tasks if t.completed]
    if status != "all":
        raise ValueError(f"unknown status filter: {status!r}")
    return list(tasks)


def sort_tasks(tasks: Iterable[Task], by: str = "date") -> list[Task]:
    """
    Stable sort for the list view.

    - date:     earliest due first, undated tasks last
    - priority: High, Medium, Low
    - title:    case-insensitive
    """
    items = list(tasks)
    if by == "date":
        dated = [(t.due, t) for t in items]
        with_due = sorted((p for p in dated if p[0] is not None), key=lambda p: p[0])
        return [t for _, t in with_due] + [t for due, t in dated if due is None]
    if by == "priority":
        return sorted(items, key=lambda t: t.priority.rank)
    if by == "title":
        return sorted(items, key=lambda t: t.title.casefold())
    raise ValueError(f"unknown sort key: {by!r}")


def task_status(task: Task, now: datetime) -> TaskStatus:
    if task.completed:
        return TaskStatus.COMPLETED
    if task.is_overdue(now):
        return TaskStatus.OVERDUE
    return TaskStatus.IN_PROGRESS


@dataclass(frozen=True, slots=True)
class CalendarBuckets:
    scheduled: list[Task]
    overdue: list[Task]
    upcoming: list[Task]


def calendar_buckets(tasks: Iterable[Task], now: datetime) -> CalendarBuckets:
    """Scheduled = any valid due date; overdue / upcoming only count open tasks."""
    scheduled: list[Task] = []
    overdue: list[Task] = []
    upcoming: list[Task] = []
    for t in tasks:
        due = t.due
        if due is None:
            continue
        scheduled.append(t)
        if t.completed:
            continue
        if due < now:
            overdue.append(t)
        elif due > now:
            upcoming.append(t)
    return CalendarBuckets(scheduled=scheduled, overdue=overdue, upcoming=upcoming)


def tasks_due_on(tasks: Iterable[Task], day: date) -> list[Task]:
    """Open tasks whose due date falls on `day` in local time, earliest first."""
    hits = [t for t in tasks if not t.completed and t.due is not None and t.due.astimezone().date() == day]
    return sort_tasks(hits, by="date")
