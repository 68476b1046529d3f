# tests/test_intent.py

from __future__ import annotations

import pytest

from study_planner.assistant.intent import classify_intent
from study_planner.assistant.models import AIAction


@pytest.mark.parametrize(
    ("prompt", "expected"),
    [
        ("Phân tích tasks", AIAction.ANALYZE_TASKS),
        ("How many tasks are left?", AIAction.ANALYZE_TASKS),
        ("Gợi ý lịch trình", AIAction.SUGGEST_SCHEDULE),
        ("please SCHEDULE my week", AIAction.SUGGEST_SCHEDULE),
        ("Tạo task học toán", AIAction.CREATE_TASK),
        ("add reading for tomorrow", AIAction.CREATE_TASK),
        ("xin chào", AIAction.UNKNOWN),
        ("", AIAction.UNKNOWN),
    ],
)
def test_classify_intent(prompt: str, expected: AIAction) -> None:
    assert classify_intent(prompt) is expected


def test_analyze_wins_over_create_and_schedule() -> None:
    assert classify_intent("tạo report lịch trình") is AIAction.ANALYZE_TASKS


def test_schedule_wins_over_create() -> None:
    assert classify_intent("create a schedule") is AIAction.SUGGEST_SCHEDULE


def test_substring_matching_is_literal() -> None:
    # "time" hides inside "sometimes", so this is a scheduling request.
    assert classify_intent("sometimes") is AIAction.SUGGEST_SCHEDULE
