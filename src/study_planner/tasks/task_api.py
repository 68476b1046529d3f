# src/study_planner/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import date, datetime, time

from ..assistant.models import AISuggestion, SuggestionPriority
from ..core.ports import TaskRepo
from .task_models import Priority, Task, utc_now_iso

logger = logging.getLogger(__name__)

_PRIORITY_FROM_SUGGESTION = {
    SuggestionPriority.HIGH: Priority.HIGH,
    SuggestionPriority.MEDIUM: Priority.MEDIUM,
    SuggestionPriority.LOW: Priority.LOW,
}

END_OF_DAY = time(23, 59, 59)


def compose_due_date(day: str, at: str = "") -> str:
    """
    Build a due timestamp from form-style input.

    - ("2025-09-10", "14:30") -> that local time, as UTC ISO
    - ("2025-09-10", "")      -> 23:59:59 local that day
    - ("", ...)               -> "" (unscheduled)

    Raises ValueError for malformed input so the caller can reject it.
    """
    day = (day or "").strip()
    if not day:
        return ""
    d = date.fromisoformat(day)
    t = time.fromisoformat(at.strip()) if at and at.strip() else END_OF_DAY
    local = datetime.combine(d, t).astimezone()
    return utc_now_iso(local)


def promote_suggestion(store: TaskRepo, suggestion: AISuggestion, *, subject: str = "") -> Task:
    """
    Persist a suggestion as a task (explicit user action).

    suggested_slot becomes the due date; lower-case suggestion priority maps
    onto task priority (Medium when absent).
    """
    priority = _PRIORITY_FROM_SUGGESTION.get(suggestion.priority, Priority.MEDIUM)
    task = store.add(
        suggestion.title,
        due_date=suggestion.suggested_slot or "",
        description=suggestion.description,
        priority=priority,
        subject=subject,
    )
    logger.info("Suggestion promoted to task id=%s title=%r", task.id, task.title)
    return task
