# tests/test_config_logging.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from study_planner.config import Settings
from study_planner.logging_setup import _ConsoleNoiseFilter, setup_logging

_ENV_NAMES = (
    "STUDY_BRIDGE_MODE",
    "STUDY_BRIDGE_URL",
    "STUDY_BRIDGE_TIMEOUT_SECONDS",
    "STUDY_DATA_DIR",
    "STUDY_LLM_API_KEY",
    "STUDY_LLM_MODELS",
    "STUDY_DEFAULT_MOOD",
    "OPENROUTER_API_KEY",
    "GEMINI_API_KEY",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()

    assert s.bridge_mode == "http"
    assert s.bridge_url == "http://localhost:5000/api/ai/analyze"
    assert s.bridge_timeout_seconds is None
    assert s.llm_api_key is None
    assert s.data_dir == Path(".local/study")
    assert s.default_mood == "neutral"
    assert s.llm_models


def test_env_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("STUDY_BRIDGE_MODE", "LLM")
    clean_env.setenv("STUDY_BRIDGE_TIMEOUT_SECONDS", "12.5")
    clean_env.setenv("STUDY_DATA_DIR", str(tmp_path))
    clean_env.setenv("OPENROUTER_API_KEY", "sk-or")
    clean_env.setenv("STUDY_LLM_MODELS", "a/one, b/two")

    s = Settings.from_env()

    assert s.bridge_mode == "llm"
    assert s.bridge_timeout_seconds == 12.5
    assert s.data_dir == tmp_path
    assert s.llm_api_key == "sk-or"
    assert s.llm_models == ["a/one", "b/two"]


def test_invalid_values_fall_back(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("STUDY_BRIDGE_MODE", "carrier-pigeon")
    clean_env.setenv("STUDY_BRIDGE_TIMEOUT_SECONDS", "soon")

    s = Settings.from_env()

    assert s.bridge_mode == "off"
    assert s.bridge_timeout_seconds is None


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("study_planner.assistant.orchestrator", logging.INFO))
    assert not f.filter(_record("study_planner.tasks.task_store", logging.DEBUG))
    assert f.filter(_record("study_planner.tasks.task_store", logging.WARNING))
    assert not f.filter(_record("httpx", logging.WARNING))
    assert f.filter(_record("openai", logging.ERROR))
    assert not f.filter(_record("py.warnings", logging.WARNING))


def test_setup_logging_writes_log_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        setup_logging(log_dir=tmp_path)
        logging.getLogger("study_planner.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in (tmp_path / "study.log").read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
        logging.captureWarnings(False)
