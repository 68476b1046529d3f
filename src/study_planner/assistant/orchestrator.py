# src/study_planner/assistant/orchestrator.py

"""
Assistant orchestration.

respond() resolves a prompt into one AIResponse:
- the remote bridge is always tried first (when configured)
- any bridge failure or malformed body falls back to local rules picked
  by the classified intent
- nothing escapes: an unexpected error becomes a generic apology

The orchestrator never touches the task store. Turning a suggestion into a
task is a separate, caller-initiated action (tasks.task_api.promote_suggestion).

The only suspension points are the bridge calls. Other callbacks on the loop
may mutate the store while a request is in flight; respond() only ever reads
the snapshot it was given.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from ..core.ports import SuggestionBridge
from ..tasks.task_models import Task
from .analyzer import analyze_tasks, format_analysis_message
from .bridge import BridgeError
from .intent import classify_intent
from .models import AIAction, AIResponse, AISuggestion, created_message, parse_remote_payload
from .suggester import draft_task_suggestions, suggest_schedule

logger = logging.getLogger(__name__)

TECHNICAL_DIFFICULTY_MESSAGE = "⚠️ Rất tiếc, tôi đang gặp sự cố kỹ thuật. Vui lòng thử lại trong giây lát!"

HELP_MESSAGE = (
    "🤔 Tôi không chắc bạn muốn gì. Bạn có thể:\n"
    "• 'Tạo task học toán' - để thêm task mới\n"
    "• 'Phân tích tasks' - để xem thống kê\n"
    "• 'Gợi ý lịch trình' - để sắp xếp thời gian"
)

SCHEDULE_MESSAGE = "📅 Dựa trên tasks hiện tại, tôi đề xuất lịch trình sau:"
NOTHING_TO_SCHEDULE_MESSAGE = "🎉 Bạn không có task nào cần sắp xếp! Mọi thứ đã được tổ chức tốt."


class AssistantOrchestrator:
    def __init__(
            self,
            bridge: SuggestionBridge | None,
            *,
            clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._bridge = bridge
        self._clock = clock or (lambda: datetime.now().astimezone())

    @property
    def has_bridge(self) -> bool:
        return self._bridge is not None

    async def _ask_remote(self, prompt: str, mood: str, tasks: Sequence[Task]) -> AIResponse | None:
        """One bridge round-trip; None on any failure or malformed body."""
        if self._bridge is None:
            return None

        payload = {
            "prompt": prompt,
            "mood": mood,
            "taskCount": len(tasks),
            "hasPendingTasks": any(not t.completed for t in tasks),
        }
        try:
            body = await self._bridge.request(payload)
        except BridgeError as e:
            logger.info("Remote suggestion failed (%s); using local fallback", e)
            return None
        except Exception:
            logger.exception("Suggestion bridge raised unexpectedly; using local fallback")
            return None

        try:
            response = parse_remote_payload(body)
        except Exception:
            logger.exception("Failed to parse remote suggestion body")
            response = None
        if response is None:
            logger.info("Remote suggestion body is malformed; using local fallback")
            logger.debug("Malformed remote body: %r", body)
        return response

    async def generate_suggestions(self, prompt: str, mood: str = "neutral") -> list[AISuggestion]:
        """
        Task proposals for a creation prompt: one remote attempt, then a
        local draft. Always returns at least one suggestion.
        """
        remote = await self._ask_remote(prompt, mood, ())
        if remote is not None and remote.suggestions:
            return list(remote.suggestions)
        return draft_task_suggestions(prompt, mood, now=self._clock())

    async def respond(self, prompt: str, existing_tasks: Sequence[Task] = (), mood: str = "neutral") -> AIResponse:
        try:
            tasks = tuple(existing_tasks)
            intent = classify_intent(prompt)

            remote = await self._ask_remote(prompt, mood, tasks)
            if remote is not None:
                return remote

            return await self._fallback(intent, prompt, tasks, mood)
        except Exception:
            logger.exception("Assistant failed to answer prompt=%r", prompt)
            return AIResponse(action=AIAction.UNKNOWN, message=TECHNICAL_DIFFICULTY_MESSAGE)

    async def _fallback(self, intent: AIAction, prompt: str, tasks: Sequence[Task], mood: str) -> AIResponse:
        now = self._clock()

        if intent is AIAction.ANALYZE_TASKS:
            analysis = analyze_tasks(tasks, now=now)
            return AIResponse(
                action=AIAction.ANALYZE_TASKS,
                message=format_analysis_message(analysis),
                analysis=analysis,
            )

        if intent is AIAction.SUGGEST_SCHEDULE:
            suggestions = suggest_schedule(tasks, now=now)
            return AIResponse(
                action=AIAction.SUGGEST_SCHEDULE,
                message=SCHEDULE_MESSAGE if suggestions else NOTHING_TO_SCHEDULE_MESSAGE,
                suggestions=suggestions,
            )

        if intent is AIAction.CREATE_TASK:
            suggestions = await self.generate_suggestions(prompt, mood)
            return AIResponse(
                action=AIAction.CREATE_TASK,
                message=created_message(len(suggestions)),
                suggestions=suggestions,
            )

        return AIResponse(action=AIAction.UNKNOWN, message=HELP_MESSAGE, suggestions=[])
