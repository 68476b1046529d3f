# src/study_planner/assistant/suggester.py

"""
Rule-based suggestions computed locally.

- suggest_schedule(): time-allocation proposals from the pending/completed mix
- draft_task_suggestions(): a task proposal built from a creation prompt,
  used when the remote service cannot produce one
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from ..tasks.task_models import Priority, Task, utc_now_iso
from .intent import CREATE_KEYWORDS
from .models import AISuggestion, SuggestionPriority

MAX_SUGGESTIONS = 3
REST_THRESHOLD = 3

EVENING_SLOT_HOUR = 20
DEFAULT_DRAFT_TITLE = "Công việc mới"

_MOOD_MINUTES = {
    "tired": 25,
    "stressed": 30,
    "neutral": 45,
    "focused": 60,
    "energetic": 60,
}

_TITLE_SEPARATORS = " \t:;,.-–"


def _completed_today(tasks: Sequence[Task], now: datetime) -> int:
    today = now.astimezone().date()
    count = 0
    for t in tasks:
        finished = t.finished if t.completed else None
        if finished is not None and finished.astimezone().date() == today:
            count += 1
    return count


def suggest_schedule(tasks: Sequence[Task], *, now: datetime | None = None) -> list[AISuggestion]:
    """
    Up to three suggestions, always in this order:
    1. pending High tasks  (45 min each, in 2 hours)
    2. pending Medium tasks (30 min each, tomorrow)
    3. a break after 3+ completions today (30 min, in 1 hour)
    """
    now = now or datetime.now().astimezone()
    pending = [t for t in tasks if not t.completed]
    high = sum(1 for t in pending if t.priority is Priority.HIGH)
    medium = sum(1 for t in pending if t.priority is Priority.MEDIUM)

    out: list[AISuggestion] = []
    if high:
        out.append(
            AISuggestion(
                title="Ưu tiên hoàn thành tasks quan trọng",
                description=f"Bạn có {high} task quan trọng cần hoàn thành",
                estimated_minutes=high * 45,
                priority=SuggestionPriority.HIGH,
                suggested_slot=utc_now_iso(now + timedelta(hours=2)),
            )
        )
    if medium:
        out.append(
            AISuggestion(
                title="Lên kế hoạch cho tasks trung bình",
                description=f"Bạn có {medium} task cần quan tâm",
                estimated_minutes=medium * 30,
                priority=SuggestionPriority.MEDIUM,
                suggested_slot=utc_now_iso(now + timedelta(hours=24)),
            )
        )
    if _completed_today(tasks, now) >= REST_THRESHOLD:
        out.append(
            AISuggestion(
                title="Nghỉ ngơi và thư giãn",
                description="Bạn đã hoàn thành nhiều task hôm nay! Hãy dành thời gian nghỉ ngơi",
                estimated_minutes=30,
                priority=SuggestionPriority.LOW,
                suggested_slot=utc_now_iso(now + timedelta(hours=1)),
            )
        )
    return out[:MAX_SUGGESTIONS]


def title_from_prompt(prompt: str) -> str:
    """Strip leading creation words ("tạo", "add", "task", ...) and capitalize the rest."""
    text = (prompt or "").strip()
    keywords = sorted(CREATE_KEYWORDS, key=len, reverse=True)
    changed = True
    while changed and text:
        changed = False
        for k in keywords:
            if text[:len(k)].lower() != k:
                continue
            rest = text[len(k):]
            if rest and rest[0] not in _TITLE_SEPARATORS:
                continue
            text = rest.lstrip(_TITLE_SEPARATORS)
            changed = True
            break
    if not text:
        return DEFAULT_DRAFT_TITLE
    return text[0].upper() + text[1:]


def next_study_slot(now: datetime) -> datetime:
    """Today's evening slot if it is at least an hour away, otherwise tomorrow's."""
    local = now.astimezone()
    slot = local.replace(hour=EVENING_SLOT_HOUR, minute=0, second=0, microsecond=0)
    if slot - local < timedelta(hours=1):
        slot += timedelta(days=1)
    return slot


def draft_task_suggestions(prompt: str, mood: str = "neutral", *, now: datetime | None = None) -> list[AISuggestion]:
    now = now or datetime.now().astimezone()
    minutes = _MOOD_MINUTES.get((mood or "").strip().lower(), _MOOD_MINUTES["neutral"])
    request = (prompt or "").strip()
    return [
        AISuggestion(
            title=title_from_prompt(request),
            description=f"Đề xuất từ yêu cầu: {request}" if request else "",
            estimated_minutes=minutes,
            priority=SuggestionPriority.MEDIUM,
            suggested_slot=utc_now_iso(next_study_slot(now)),
        )
    ]
