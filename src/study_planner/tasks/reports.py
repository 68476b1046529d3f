# src/study_planner/tasks/reports.py

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from .task_models import Priority, Task

STUDY_KEYWORDS = ("assignment", "exam", "homework", "study", "read", "project")
OTHER_STUDY_SUBJECT = "Other Study Tasks"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (browser Math.round semantics)."""
    return int(math.floor(value + 0.5))


def priority_distribution(tasks: Iterable[Task]) -> dict[Priority, int]:
    counts = {p: 0 for p in Priority}
    for t in tasks:
        counts[t.priority] += 1
    return counts


def due_date_coverage(tasks: Sequence[Task]) -> tuple[int, int]:
    """(tasks with a valid due date, tasks without one)."""
    with_due = sum(1 for t in tasks if t.due is not None)
    return with_due, len(tasks) - with_due


def completion_trend(tasks: Sequence[Task], *, days: int = 7, now: datetime | None = None) -> list[int]:
    """Completions per local calendar day for the last `days` days, oldest first."""
    now = now or datetime.now().astimezone()
    today = now.astimezone().date()
    per_day: dict[date, int] = {}
    for t in tasks:
        finished = t.finished if t.completed else None
        if finished is None:
            continue
        d = finished.astimezone().date()
        per_day[d] = per_day.get(d, 0) + 1
    return [per_day.get(today - timedelta(days=i), 0) for i in range(days - 1, -1, -1)]


def is_study_task(task: Task) -> bool:
    if task.subject.strip():
        return True
    title = task.title.lower()
    return any(k in title for k in STUDY_KEYWORDS)


@dataclass(frozen=True, slots=True)
class StudyBreakdown:
    total: int
    completed: int
    pending: int
    by_subject: dict[str, int] = field(default_factory=dict)


def study_breakdown(tasks: Iterable[Task]) -> StudyBreakdown:
    study = [t for t in tasks if is_study_task(t)]
    by_subject: dict[str, int] = {}
    for t in study:
        key = t.subject.strip() or OTHER_STUDY_SUBJECT
        by_subject[key] = by_subject.get(key, 0) + 1
    completed = sum(1 for t in study if t.completed)
    return StudyBreakdown(
        total=len(study),
        completed=completed,
        pending=len(study) - completed,
        by_subject=by_subject,
    )


def average_completion_days(tasks: Iterable[Task], *, now: datetime | None = None) -> int:
    """Mean distance in whole days between due date and completion, over completed dated tasks."""
    now = now or datetime.now().astimezone()
    gaps: list[float] = []
    for t in tasks:
        due = t.due
        if not t.completed or due is None:
            continue
        finished = t.finished or now
        gaps.append(abs((finished - due).total_seconds()))
    if not gaps:
        return 0
    return round_half_up(sum(gaps) / len(gaps) / 86400)


def productivity_score(tasks: Sequence[Task]) -> int:
    if not tasks:
        return 0
    completed = sum(1 for t in tasks if t.completed)
    completed_high = sum(1 for t in tasks if t.completed and t.priority is Priority.HIGH)
    return min(100, round_half_up(completed / len(tasks) * 100 + completed_high * 10))
