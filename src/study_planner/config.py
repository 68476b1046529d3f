# src/study_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- The assistant works without any remote service (bridge mode "off").
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "STUDY"

BRIDGE_MODES = ("http", "llm", "off")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Real environment variables win over .env entries.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_timeout(name: str) -> float | None:
    """Empty, zero or invalid values mean "no timeout"."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data ----
    data_dir: Path
    tasks_record_key: str

    # ---- Remote suggestion bridge ----
    bridge_mode: str
    bridge_url: str
    bridge_timeout_seconds: float | None

    # ---- LLM (OpenAI-compatible) ----
    llm_api_key: str | None
    llm_base_url: str
    llm_models: list[str]
    extra_headers: dict[str, str]

    # ---- Assistant ----
    default_mood: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "study-planner")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/study"))
        tasks_record_key = _env(_k("TASKS_RECORD_KEY"), "tasks").strip() or "tasks"

        bridge_mode = _env(_k("BRIDGE_MODE"), "http").strip().lower()
        if bridge_mode not in BRIDGE_MODES:
            bridge_mode = "off"
        bridge_url = _env(_k("BRIDGE_URL"), "http://localhost:5000/api/ai/analyze").strip()
        bridge_timeout_seconds = _env_timeout(_k("BRIDGE_TIMEOUT_SECONDS"))

        llm_api_key = _first_env(_k("LLM_API_KEY"), "OPENROUTER_API_KEY", "GEMINI_API_KEY", default=None)
        llm_base_url = _env(_k("LLM_BASE_URL"), "https://openrouter.ai/api/v1")
        llm_models = _env_list(
            _k("LLM_MODELS"),
            [
                "google/gemini-flash-1.5",
                "qwen/qwen-2.5-72b-instruct:free",
            ],
        )
        extra_headers = {
            "HTTP-Referer": _env(_k("HTTP_REFERER"), "https://example.com"),
            "X-Title": app_name,
        }

        default_mood = _env(_k("DEFAULT_MOOD"), "neutral").strip() or "neutral"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_record_key=tasks_record_key,
            bridge_mode=bridge_mode,
            bridge_url=bridge_url,
            bridge_timeout_seconds=bridge_timeout_seconds,
            llm_api_key=llm_api_key,
            llm_base_url=llm_base_url,
            llm_models=llm_models,
            extra_headers=extra_headers,
            default_mood=default_mood,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
