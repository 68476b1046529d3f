# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from study_planner.assistant.orchestrator import AssistantOrchestrator
from study_planner.core.state import AppState
from study_planner.tasks.storage import MemoryStorage
from study_planner.tasks.task_store import TaskStore

from .fakes import FailingBridge


@pytest.fixture()
def now() -> datetime:
    """Fixed local noon, so "today" never straddles midnight during a test."""
    return datetime(2025, 9, 10, 12, 0).astimezone()


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap code.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and .env files.
    """
    return SimpleNamespace(
        app_name="study-planner",
        log_level="INFO",
        data_dir=tmp_path / "data",
        tasks_record_key="tasks",
        bridge_mode="off",
        bridge_url="",
        bridge_timeout_seconds=None,
        llm_api_key=None,
        llm_base_url="https://openrouter.ai/api/v1",
        llm_models=["model-a", "model-b"],
        extra_headers={},
        default_mood="neutral",
    )


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def store(storage: MemoryStorage) -> TaskStore:
    s = TaskStore(storage)
    s.load()
    return s


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, now: datetime) -> AppState:
    """
    AppState wired with an in-memory store and an unreachable bridge,
    so every assistant answer comes from local rules.
    """
    return AppState(
        settings=settings,
        task_store=store,
        assistant=AssistantOrchestrator(FailingBridge(), clock=lambda: now),
    )
