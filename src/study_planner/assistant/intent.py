# src/study_planner/assistant/intent.py

from __future__ import annotations

from .models import AIAction

# Checked in this order; the first group with a hit wins (analyze > schedule > create).
ANALYZE_KEYWORDS = (
    "phân tích", "analyze", "thống kê", "statistic", "bao nhiêu",
    "how many", "tổng hợp", "summary", "report",
)
SCHEDULE_KEYWORDS = ("lịch trình", "schedule", "sắp xếp", "arrange", "thời gian", "time")
CREATE_KEYWORDS = ("tạo", "create", "thêm", "add", "mới", "new", "task", "công việc")

_GROUPS: tuple[tuple[AIAction, tuple[str, ...]], ...] = (
    (AIAction.ANALYZE_TASKS, ANALYZE_KEYWORDS),
    (AIAction.SUGGEST_SCHEDULE, SCHEDULE_KEYWORDS),
    (AIAction.CREATE_TASK, CREATE_KEYWORDS),
)


def classify_intent(prompt: str) -> AIAction:
    """Map a free-text prompt to analyze_tasks / suggest_schedule / create_task / unknown."""
    text = (prompt or "").lower()
    for action, keywords in _GROUPS:
        if any(k in text for k in keywords):
            return action
    return AIAction.UNKNOWN
