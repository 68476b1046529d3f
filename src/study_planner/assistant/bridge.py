# src/study_planner/assistant/bridge.py

"""
Remote suggestion bridges.

Both implementations honour the same contract: request(payload) returns the
decoded JSON body, or raises BridgeError. Callers never see httpx/openai
exceptions.

- HttpSuggestionBridge: POSTs the payload to a relay endpoint
- LLMSuggestionBridge: talks to an OpenAI-compatible chat endpoint directly
  and returns {"suggestions": [...]} extracted from the model's reply
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import time
from datetime import datetime
from typing import Any

import httpx
import openai
from openai import OpenAI

logger = logging.getLogger(__name__)

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

SUGGESTION_SYSTEM_PROMPT = """
Bạn là một trợ lý học tập thông minh.
Dựa trên input của người dùng, hãy trả về CHỈ JSON dạng mảng các object task suggestion:

[
  {{
    "title": "string (tên task ngắn gọn)",
    "description": "string (mô tả chi tiết)",
    "estimatedMinutes": number (thời gian ước tính),
    "priority": "low|medium|high",
    "suggestedSlot": "2025-09-10T20:00:00+07:00" (hoặc null)
  }}
]

Yêu cầu:
- Trả về 1-3 task suggestions
- Ưu tiên dựa trên mood: {mood}
- Hôm nay là {today}; suggestedSlot nên là khung giờ hợp lý trong 7 ngày tới
- Người dùng hiện có {task_count} task ({pending})
- Không viết thêm text ngoài JSON
""".strip()


class BridgeError(RuntimeError):
    """Any failure to obtain a usable body from the remote service."""


class BridgeNotConfiguredError(BridgeError):
    """Raised when the bridge lacks a URL, API key or model list."""


def friendly_bridge_error_message(err: Exception) -> str:
    if isinstance(err, BridgeNotConfiguredError):
        return (
            "AI service is not configured. Set STUDY_BRIDGE_URL (http mode) or "
            "STUDY_LLM_API_KEY (llm mode), or use STUDY_BRIDGE_MODE=off for local answers only."
        )
    msg = str(err).strip()
    return msg or "AI service error."


class HttpSuggestionBridge:
    """
    POST {prompt, mood, taskCount, hasPendingTasks} as JSON to a relay URL.

    No timeout by default: a hanging relay leaves that one assistant request
    pending without blocking anything else on the loop.
    """

    def __init__(
            self,
            url: str,
            *,
            timeout: float | None = None,
            client: httpx.AsyncClient | None = None,
    ) -> None:
        if not url or not url.strip():
            raise BridgeNotConfiguredError("Suggestion bridge URL is not set.")
        self._url = url.strip()
        self._timeout = timeout
        self._client = client

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self._url, json=payload)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(self._url, json=payload)

    async def request(self, payload: dict[str, Any]) -> Any:
        try:
            resp = await self._post(payload)
        except httpx.HTTPError as e:
            raise BridgeError(f"Suggestion bridge transport error ({e.__class__.__name__})") from e

        if not resp.is_success:
            raise BridgeError(f"Suggestion bridge returned HTTP {resp.status_code}")

        try:
            return resp.json()
        except ValueError as e:
            raise BridgeError("Suggestion bridge returned a non-JSON body") from e


# ---- LLM-backed bridge ----


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"AuthenticationError", "PermissionDeniedError", "UnauthorizedError"}


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError) or exc.__class__.__name__ == "NotFoundError"


def extract_json_array(text: str) -> list[Any] | None:
    """First-[ to last-] slice of the reply, decoded; None if absent or invalid."""
    match = _JSON_ARRAY_RE.search(text or "")
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except ValueError:
        return None
    return parsed if isinstance(parsed, list) else None


class LLMSuggestionBridge:
    """
    Generate task suggestions with an OpenAI-compatible chat model.

    Behavior:
    - tries models in the configured order
    - 404 (model not available) -> model is skipped for an hour
    - auth errors -> fail fast, no retries across models
    - network errors, rate limits, unparseable replies -> next model
    """

    MODEL_RETRY_AFTER_SECONDS = 3600.0

    def __init__(self, settings: Any, *, client: Any | None = None) -> None:
        self._api_key = getattr(settings, "llm_api_key", None)
        self._base_url = str(getattr(settings, "llm_base_url", "") or "")
        self._models: list[str] = [m.strip() for m in (getattr(settings, "llm_models", None) or []) if m.strip()]
        self._headers: dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._timeout = getattr(settings, "bridge_timeout_seconds", None)
        self._client = client
        self._bad_models: dict[str, float] = {}  # model -> retry_at (monotonic)

        if client is None and (not self._api_key or not str(self._api_key).strip()):
            raise BridgeNotConfiguredError("LLM API key is not set.")
        if not self._models:
            raise BridgeNotConfiguredError("LLM model list is empty.")

    def _get_client(self) -> Any:
        """Lazily create the SDK client; automatic retries are off so model fallback stays quick."""
        if self._client is None:
            self._client = OpenAI(
                base_url=self._base_url or None,
                api_key=str(self._api_key),
                timeout=self._timeout,
                max_retries=0,
            )
        return self._client

    @staticmethod
    def build_messages(payload: dict[str, Any], *, today: str | None = None) -> list[dict[str, str]]:
        mood = str(payload.get("mood") or "neutral")
        task_count = int(payload.get("taskCount") or 0)
        pending = "còn task chưa hoàn thành" if payload.get("hasPendingTasks") else "không có task đang chờ"
        system = SUGGESTION_SYSTEM_PROMPT.format(
            mood=mood,
            today=today or datetime.now().astimezone().date().isoformat(),
            task_count=task_count,
            pending=pending,
        )
        return [
            {"role": "system", "content": system},
            {"role": "user", "content": f"User input: {payload.get('prompt', '')}"},
        ]

    def _complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        client = self._get_client()
        messages = self.build_messages(payload)
        last_error: Exception | None = None
        now = time.monotonic()

        for model in self._models:
            retry_at = self._bad_models.get(model)
            if retry_at is not None and retry_at > now:
                continue

            logger.info("LLM bridge: trying model=%s", model)
            try:
                resp = client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=0.7,
                    max_tokens=800,
                    extra_headers=self._headers or None,
                )
                text = resp.choices[0].message.content or ""
            except Exception as e:
                last_error = e
                if _is_auth_error(e):
                    raise BridgeError("LLM authentication failed. Check STUDY_LLM_API_KEY.") from e
                if _is_not_found_error(e):
                    self._bad_models[model] = time.monotonic() + self.MODEL_RETRY_AFTER_SECONDS
                    logger.info("LLM bridge: model not available (404): %s", model)
                    continue
                logger.info("LLM bridge: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

            parsed = extract_json_array(text)
            if parsed is None:
                last_error = ValueError(f"Unparseable reply from model: {model}")
                logger.info("LLM bridge: no JSON array in reply from model=%s", model)
                continue

            logger.debug("LLM bridge: %d suggestion(s) from model=%s", len(parsed), model)
            return {"suggestions": parsed}

        raise BridgeError("All LLM models failed.") from last_error

    async def request(self, payload: dict[str, Any]) -> Any:
        return await asyncio.to_thread(self._complete, payload)
