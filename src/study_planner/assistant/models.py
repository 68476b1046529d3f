# src/study_planner/assistant/models.py

"""
Assistant data shapes and boundary parsing.

Remote payloads are loosely typed JSON. parse_remote_payload() is the only
place that looks at them; everything past it works with the strict
AIResponse / AISuggestion dataclasses below.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ..tasks.task_models import parse_timestamp
from .analyzer import TaskAnalysis

logger = logging.getLogger(__name__)


class AIAction(StrEnum):
    CREATE_TASK = "create_task"
    ANALYZE_TASKS = "analyze_tasks"
    SUMMARIZE = "summarize"
    SUGGEST_SCHEDULE = "suggest_schedule"
    UNKNOWN = "unknown"


class SuggestionPriority(StrEnum):
    """Lower-case priority used by suggestions (distinct from Task.priority)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Any) -> SuggestionPriority | None:
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class AISuggestion:
    title: str
    description: str = ""
    estimated_minutes: int | None = None
    priority: SuggestionPriority | None = None
    suggested_slot: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"title": self.title}
        if self.description:
            out["description"] = self.description
        if self.estimated_minutes is not None:
            out["estimatedMinutes"] = self.estimated_minutes
        if self.priority is not None:
            out["priority"] = self.priority.value
        out["suggestedSlot"] = self.suggested_slot
        return out


@dataclass(frozen=True, slots=True)
class AIResponse:
    action: AIAction
    message: str
    suggestions: list[AISuggestion] = field(default_factory=list)
    analysis: TaskAnalysis | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "action": self.action.value,
            "message": self.message,
            "suggestions": [s.to_dict() for s in self.suggestions],
        }
        if self.analysis is not None:
            out["analysis"] = self.analysis.to_dict()
        return out


def created_message(count: int) -> str:
    return f"✅ Đã tạo {count} task đề xuất cho bạn!"


# ---- boundary parsing ----


def parse_suggestion(raw: Any) -> AISuggestion | None:
    """Validate one suggestion object; returns None when it has no usable title."""
    if not isinstance(raw, Mapping):
        return None
    title = raw.get("title")
    if not isinstance(title, str) or not title.strip():
        return None

    description = raw.get("description")
    minutes_raw = raw.get("estimatedMinutes")
    minutes: int | None = None
    if isinstance(minutes_raw, (int, float)) and not isinstance(minutes_raw, bool) and math.isfinite(minutes_raw):
        rounded = int(round(minutes_raw))
        # Sub-minute estimates round to 0.
        minutes = rounded if rounded > 0 else None

    slot_raw = raw.get("suggestedSlot")
    slot = slot_raw.strip() if isinstance(slot_raw, str) and parse_timestamp(slot_raw) else None

    return AISuggestion(
        title=title.strip(),
        description=description.strip() if isinstance(description, str) else "",
        estimated_minutes=minutes,
        priority=SuggestionPriority.parse(raw.get("priority")),
        suggested_slot=slot,
    )


def parse_suggestions(raw: Any) -> list[AISuggestion] | None:
    """None if `raw` is not a list; invalid entries inside a list are skipped."""
    if not isinstance(raw, list):
        return None
    out: list[AISuggestion] = []
    for item in raw:
        s = parse_suggestion(item)
        if s is None:
            logger.debug("Dropping malformed suggestion: %r", item)
            continue
        out.append(s)
    return out


def parse_remote_payload(payload: Any) -> AIResponse | None:
    """
    Normalize a remote body into an AIResponse.

    Accepted shapes:
    - {"suggestions": [...]}                      -> create_task response
    - {"action": ..., "message": ..., ...}        -> full response
    - [...]                                       -> bare suggestion array

    Returns None for anything else (error bodies, wrong types, unknown action).
    """
    if isinstance(payload, list):
        suggestions = parse_suggestions(payload) or []
        return AIResponse(action=AIAction.CREATE_TASK, message=created_message(len(suggestions)), suggestions=suggestions)

    if not isinstance(payload, Mapping):
        return None
    if payload.get("error"):
        return None

    raw_action = payload.get("action")
    raw_suggestions = payload.get("suggestions")

    if raw_action is None:
        suggestions = parse_suggestions(raw_suggestions)
        if suggestions is None:
            return None
        return AIResponse(action=AIAction.CREATE_TASK, message=created_message(len(suggestions)), suggestions=suggestions)

    try:
        action = AIAction(str(raw_action))
    except ValueError:
        return None

    message = payload.get("message")
    if not isinstance(message, str):
        return None

    suggestions = [] if raw_suggestions is None else parse_suggestions(raw_suggestions)
    if suggestions is None:
        return None

    analysis_raw = payload.get("analysis")
    analysis = TaskAnalysis.from_dict(analysis_raw) if isinstance(analysis_raw, Mapping) else None

    return AIResponse(action=action, message=message, suggestions=suggestions, analysis=analysis)
