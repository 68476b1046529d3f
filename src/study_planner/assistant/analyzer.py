# src/study_planner/assistant/analyzer.py

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from ..tasks.reports import round_half_up
from ..tasks.task_models import Priority, Task

RECENT_WINDOW = timedelta(days=7)

# Python attribute -> wire key
_WIRE_KEYS = {
    "total_tasks": "totalTasks",
    "completed_tasks": "completedTasks",
    "pending_tasks": "pendingTasks",
    "high_priority_tasks": "highPriorityTasks",
    "overdue_tasks": "overdueTasks",
    "recent_tasks": "recentTasks",
    "completion_rate": "completionRate",
}


@dataclass(frozen=True, slots=True)
class TaskAnalysis:
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    high_priority_tasks: int = 0
    overdue_tasks: int = 0
    recent_tasks: int = 0
    completion_rate: int = 0

    def to_dict(self) -> dict[str, int]:
        return {wire: getattr(self, attr) for attr, wire in _WIRE_KEYS.items()}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> TaskAnalysis:
        """Tolerant parse of a remote analysis object; non-numeric or non-finite values become 0."""
        values: dict[str, int] = {}
        for attr, wire in _WIRE_KEYS.items():
            v = raw.get(wire)
            values[attr] = int(v) if isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v) else 0
        return cls(**values)


def analyze_tasks(tasks: Sequence[Task], *, now: datetime | None = None) -> TaskAnalysis:
    """Aggregate counts over a task snapshot. Pure; never raises on bad dates."""
    now = now or datetime.now().astimezone()
    recent_cutoff = now - RECENT_WINDOW

    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    high = sum(1 for t in tasks if t.priority is Priority.HIGH)
    overdue = sum(1 for t in tasks if t.is_overdue(now))
    recent = 0
    for t in tasks:
        created = t.created
        if created is not None and created > recent_cutoff:
            recent += 1

    return TaskAnalysis(
        total_tasks=total,
        completed_tasks=completed,
        pending_tasks=total - completed,
        high_priority_tasks=high,
        overdue_tasks=overdue,
        recent_tasks=recent,
        completion_rate=round_half_up(completed / total * 100) if total else 0,
    )


def format_analysis_message(analysis: TaskAnalysis) -> str:
    return (
        "📊 Phân tích tasks của bạn:\n\n"
        f"• Tổng số task: {analysis.total_tasks}\n"
        f"• Đã hoàn thành: {analysis.completed_tasks}\n"
        f"• Chưa hoàn thành: {analysis.pending_tasks}\n"
        f"• Task quan trọng: {analysis.high_priority_tasks}\n"
        f"• Task trễ hạn: {analysis.overdue_tasks}\n"
        f"• Tỷ lệ hoàn thành: {analysis.completion_rate}%"
    )
