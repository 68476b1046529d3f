# src/study_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..assistant.models import AISuggestion
from ..assistant.orchestrator import AssistantOrchestrator
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (real Settings or a test SimpleNamespace).
    settings: Any

    task_store: TaskStore
    assistant: AssistantOrchestrator

    mood: str = "neutral"

    # Suggestions from the last assistant answer, addressable by /accept N.
    last_suggestions: list[AISuggestion] = field(default_factory=list)
