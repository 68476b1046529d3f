# tests/test_suggester.py

from __future__ import annotations

from datetime import datetime, timedelta

from study_planner.assistant.models import SuggestionPriority
from study_planner.assistant.suggester import (
    DEFAULT_DRAFT_TITLE,
    draft_task_suggestions,
    next_study_slot,
    suggest_schedule,
    title_from_prompt,
)
from study_planner.tasks.task_models import Priority, Task, parse_timestamp, utc_now_iso


def _open(i: int, priority: Priority) -> Task:
    return Task(id=f"o{i}", title=f"open {i}", created_at="", priority=priority)


def _done_at(i: int, when: datetime) -> Task:
    stamp = utc_now_iso(when)
    return Task(id=f"d{i}", title=f"done {i}", created_at=stamp, completed=True, completed_at=stamp)


def test_two_high_tasks_get_ninety_minutes(now: datetime) -> None:
    tasks = [_open(1, Priority.HIGH), _open(2, Priority.HIGH)]

    suggestions = suggest_schedule(tasks, now=now)

    assert len(suggestions) == 1
    s = suggestions[0]
    assert s.estimated_minutes == 90
    assert s.priority is SuggestionPriority.HIGH
    assert "2" in s.description
    assert parse_timestamp(s.suggested_slot) == now.replace(microsecond=0) + timedelta(hours=2)


def test_medium_tasks_are_planned_for_tomorrow(now: datetime) -> None:
    tasks = [_open(i, Priority.MEDIUM) for i in range(3)] + [_open(9, Priority.LOW)]

    suggestions = suggest_schedule(tasks, now=now)

    assert len(suggestions) == 1
    assert suggestions[0].estimated_minutes == 90
    assert suggestions[0].priority is SuggestionPriority.MEDIUM
    assert parse_timestamp(suggestions[0].suggested_slot) == now.replace(microsecond=0) + timedelta(hours=24)


def test_three_completions_today_suggest_a_break(now: datetime) -> None:
    tasks = [_done_at(i, now) for i in range(3)]

    suggestions = suggest_schedule(tasks, now=now)

    assert len(suggestions) == 1
    assert suggestions[0].estimated_minutes == 30
    assert suggestions[0].priority is SuggestionPriority.LOW


def test_completions_from_other_days_do_not_count(now: datetime) -> None:
    tasks = [_done_at(i, now - timedelta(days=2)) for i in range(5)]
    assert suggest_schedule(tasks, now=now) == []


def test_order_and_cap(now: datetime) -> None:
    tasks = [_open(1, Priority.MEDIUM), _open(2, Priority.HIGH)] + [_done_at(i, now) for i in range(3)]

    suggestions = suggest_schedule(tasks, now=now)

    assert [s.priority for s in suggestions] == [
        SuggestionPriority.HIGH,
        SuggestionPriority.MEDIUM,
        SuggestionPriority.LOW,
    ]


def test_nothing_pending_nothing_suggested(now: datetime) -> None:
    assert suggest_schedule([], now=now) == []
    assert suggest_schedule([_open(1, Priority.LOW)], now=now) == []


def test_title_from_prompt_strips_creation_words() -> None:
    assert title_from_prompt("Tạo task học toán") == "Học toán"
    assert title_from_prompt("add task: read chapter 2") == "Read chapter 2"
    assert title_from_prompt("Newton's laws") == "Newton's laws"
    assert title_from_prompt("tạo task") == DEFAULT_DRAFT_TITLE
    assert title_from_prompt("") == DEFAULT_DRAFT_TITLE


def test_next_study_slot_today_or_tomorrow(now: datetime) -> None:
    noon = now
    assert next_study_slot(noon) == noon.replace(hour=20, minute=0, second=0, microsecond=0)

    late = noon.replace(hour=19, minute=30)
    slot = next_study_slot(late)
    assert slot.date() == (late + timedelta(days=1)).date()
    assert slot.hour == 20


def test_draft_uses_mood_for_duration(now: datetime) -> None:
    tired = draft_task_suggestions("Tạo task học toán", "tired", now=now)
    focused = draft_task_suggestions("Tạo task học toán", "focused", now=now)
    odd = draft_task_suggestions("Tạo task học toán", "sleepy", now=now)

    assert len(tired) == 1
    assert tired[0].title == "Học toán"
    assert tired[0].description == "Đề xuất từ yêu cầu: Tạo task học toán"
    assert tired[0].priority is SuggestionPriority.MEDIUM
    assert tired[0].estimated_minutes == 25
    assert focused[0].estimated_minutes == 60
    assert odd[0].estimated_minutes == 45
    assert parse_timestamp(tired[0].suggested_slot) is not None


def test_title_from_prompt_matches_keywords_case_insensitively() -> None:
    assert title_from_prompt("TẠO TASK học hóa") == "Học hóa"
    assert title_from_prompt("İstanbul trip notes") == "İstanbul trip notes"
    assert title_from_prompt("ADD: İngilizce kelimeler") == "İngilizce kelimeler"
