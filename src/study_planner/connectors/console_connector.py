# src/study_planner/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..assistant.models import AIResponse
from ..assistant.orchestrator import TECHNICAL_DIFFICULTY_MESSAGE
from ..cli.commands import format_suggestions, registry as command_registry
from ..core.ports import TaskSnapshot
from ..core.state import AppState

logger = logging.getLogger(__name__)

WELCOME = (
    "👋 Xin chào! Tôi có thể giúp bạn:\n"
    "• Tạo task mới thông minh\n"
    "• Phân tích và tối ưu workflow\n"
    "• Gợi ý lịch trình cá nhân hóa\n"
    "Use /help for commands, /exit to quit."
)

CANCELLED_MESSAGE = "⏹ Request cancelled. Ask again or type /exit to quit."


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def render_response(response: AIResponse) -> str:
    text = response.message
    if response.suggestions:
        text += "\n" + format_suggestions(response.suggestions)
    return text


def ask_assistant(state: AppState, prompt: str) -> AIResponse:
    """Run one assistant request to completion and remember its suggestions."""
    response = asyncio.run(state.assistant.respond(prompt, state.task_store.snapshot(), state.mood))
    state.last_suggestions = list(response.suggestions)
    return response


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (bridge=%s).", state.assistant.has_bridge)
    _print_ts(WELCOME + "\n")

    app_name = str(getattr(state.settings, "app_name", "study-planner"))

    def on_change(snapshot: TaskSnapshot) -> None:
        active = sum(1 for t in snapshot if not t.completed)
        _print_ts(f"[TASKS] {len(snapshot)} total, {active} active")

    unsubscribe = state.task_store.subscribe(on_change)
    try:
        while True:
            try:
                user_input = input(">>> You: ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                cmd_response = command_registry.handle(state, user_input)
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."

            if cmd_response is not None:
                _print_ts(cmd_response)
                continue

            try:
                response = ask_assistant(state, user_input)
            except KeyboardInterrupt:
                # Ctrl-C while waiting abandons this request only; earlier suggestions stay.
                logger.info("Assistant request cancelled by user.")
                _print_ts(CANCELLED_MESSAGE)
                continue
            except Exception:
                logger.exception("Console assistant handler crashed.")
                _print_ts(TECHNICAL_DIFFICULTY_MESSAGE)
                continue

            _print_ts(f"<<< {app_name}: {render_response(response)}\n")
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
