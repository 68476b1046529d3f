# src/study_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires storage, the task store and the assistant into AppState.
"""

from __future__ import annotations

import logging

from ..assistant.bridge import (
    BridgeNotConfiguredError,
    HttpSuggestionBridge,
    LLMSuggestionBridge,
    friendly_bridge_error_message,
)
from ..assistant.orchestrator import AssistantOrchestrator
from ..config import get_settings
from ..core.ports import RecordStorage, SuggestionBridge
from ..core.state import AppState
from ..tasks.storage import JsonFileStorage
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def build_bridge(settings) -> SuggestionBridge | None:
    """
    Pick the suggestion bridge for settings.bridge_mode.

    A bridge that cannot be configured is reported once and replaced by
    None: the assistant then answers from local rules only.
    """
    mode = str(getattr(settings, "bridge_mode", "off") or "off").lower()
    try:
        if mode == "http":
            return HttpSuggestionBridge(
                settings.bridge_url,
                timeout=getattr(settings, "bridge_timeout_seconds", None),
            )
        if mode == "llm":
            return LLMSuggestionBridge(settings)
    except BridgeNotConfiguredError as e:
        logger.warning("Suggestion bridge disabled (%s): %s %s", mode, e, friendly_bridge_error_message(e))
        return None
    return None


def create_initial_state(*, settings=None, storage: RecordStorage | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and storage) injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back
    to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        storage = JsonFileStorage(settings.data_dir)

    store = TaskStore(storage, record_key=getattr(settings, "tasks_record_key", "tasks"))
    store.load()

    assistant = AssistantOrchestrator(build_bridge(settings))

    return AppState(
        settings=settings,
        task_store=store,
        assistant=assistant,
        mood=getattr(settings, "default_mood", "neutral"),
    )
