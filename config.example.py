# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "STUDY_APP_NAME": "App display name (default: study-planner).",
    "STUDY_LOG_LEVEL": "Console logging level (default: INFO).",
    # Local data (gitignored)
    "STUDY_DATA_DIR": "Directory for the tasks record and logs (default: .local/study).",
    "STUDY_TASKS_RECORD_KEY": "Name of the record holding the task list (default: tasks).",
    # Remote suggestion bridge
    "STUDY_BRIDGE_MODE": "http | llm | off (default: http). off answers from local rules only.",
    "STUDY_BRIDGE_URL": "Relay endpoint for http mode (default: http://localhost:5000/api/ai/analyze).",
    "STUDY_BRIDGE_TIMEOUT_SECONDS": "Optional request timeout; empty or 0 means wait indefinitely.",
    # LLM (OpenAI-compatible: OpenRouter, Gemini OpenAI endpoint, ...)
    "STUDY_LLM_API_KEY": "API key for llm mode (falls back to OPENROUTER_API_KEY, GEMINI_API_KEY).",
    "STUDY_LLM_BASE_URL": "Base URL (default: https://openrouter.ai/api/v1).",
    "STUDY_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "STUDY_HTTP_REFERER": "Optional OpenRouter metadata header.",
    # Assistant
    "STUDY_DEFAULT_MOOD": "Mood sent with assistant requests (default: neutral).",
}
