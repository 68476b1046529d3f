# tests/test_models_parsing.py

from __future__ import annotations

from study_planner.assistant.analyzer import TaskAnalysis
from study_planner.assistant.models import (
    AIAction,
    AIResponse,
    AISuggestion,
    SuggestionPriority,
    parse_remote_payload,
    parse_suggestion,
)


def test_parse_suggestion_full() -> None:
    s = parse_suggestion(
        {
            "title": "  Ôn tập chương 2 ",
            "description": "Làm bài tập cuối chương",
            "estimatedMinutes": 45,
            "priority": "HIGH",
            "suggestedSlot": "2025-09-10T20:00:00+07:00",
        }
    )

    assert s == AISuggestion(
        title="Ôn tập chương 2",
        description="Làm bài tập cuối chương",
        estimated_minutes=45,
        priority=SuggestionPriority.HIGH,
        suggested_slot="2025-09-10T20:00:00+07:00",
    )


def test_parse_suggestion_drops_bad_optional_fields() -> None:
    s = parse_suggestion(
        {"title": "Read", "estimatedMinutes": -5, "priority": "urgent", "suggestedSlot": "tonight", "description": 3}
    )

    assert s == AISuggestion(title="Read")


def test_parse_suggestion_rejects_missing_title() -> None:
    assert parse_suggestion({"description": "no title"}) is None
    assert parse_suggestion({"title": "   "}) is None
    assert parse_suggestion("Read") is None


def test_bare_suggestions_object_becomes_create_task() -> None:
    response = parse_remote_payload({"suggestions": [{"title": "A"}, {"nope": 1}, {"title": "B"}]})

    assert response is not None
    assert response.action is AIAction.CREATE_TASK
    assert [s.title for s in response.suggestions] == ["A", "B"]
    assert response.message == "✅ Đã tạo 2 task đề xuất cho bạn!"


def test_bare_array_becomes_create_task() -> None:
    response = parse_remote_payload([{"title": "A"}])
    assert response.action is AIAction.CREATE_TASK
    assert response.suggestions == [AISuggestion(title="A")]


def test_full_response_passes_through() -> None:
    payload = {
        "action": "analyze_tasks",
        "message": "ok",
        "suggestions": [],
        "analysis": {"totalTasks": 2, "completedTasks": 1, "pendingTasks": 1, "completionRate": 50},
    }

    response = parse_remote_payload(payload)

    assert response == AIResponse(
        action=AIAction.ANALYZE_TASKS,
        message="ok",
        suggestions=[],
        analysis=TaskAnalysis(total_tasks=2, completed_tasks=1, pending_tasks=1, completion_rate=50),
    )


def test_full_response_without_suggestions_key() -> None:
    response = parse_remote_payload({"action": "summarize", "message": "done"})
    assert response == AIResponse(action=AIAction.SUMMARIZE, message="done")


def test_malformed_bodies_are_rejected() -> None:
    for body in (
        None,
        "text",
        42,
        {"error": "parse_failed"},
        {"error": "upstream", "suggestions": []},
        {},
        {"suggestions": "A"},
        {"action": "dance", "message": "?"},
        {"action": "create_task"},
        {"action": "create_task", "message": "x", "suggestions": {"title": "A"}},
    ):
        assert parse_remote_payload(body) is None, body


def test_response_to_dict() -> None:
    response = AIResponse(
        action=AIAction.CREATE_TASK,
        message="m",
        suggestions=[AISuggestion(title="A", estimated_minutes=30, priority=SuggestionPriority.LOW)],
    )

    assert response.to_dict() == {
        "action": "create_task",
        "message": "m",
        "suggestions": [{"title": "A", "estimatedMinutes": 30, "priority": "low", "suggestedSlot": None}],
    }


def test_parse_suggestion_drops_sub_minute_and_non_finite_estimates() -> None:
    for minutes in (0.4, 0, float("inf"), float("-inf"), float("nan")):
        s = parse_suggestion({"title": "Read", "estimatedMinutes": minutes})
        assert s == AISuggestion(title="Read"), minutes

    assert parse_suggestion({"title": "Read", "estimatedMinutes": 0.6}).estimated_minutes == 1


def test_non_finite_analysis_values_become_zero() -> None:
    response = parse_remote_payload(
        {
            "action": "analyze_tasks",
            "message": "m",
            "analysis": {"totalTasks": float("nan"), "completedTasks": float("inf"), "pendingTasks": 2},
        }
    )

    assert response is not None
    assert response.analysis == TaskAnalysis(pending_tasks=2)
