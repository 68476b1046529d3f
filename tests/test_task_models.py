# tests/test_task_models.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from study_planner.tasks.task_models import Priority, Task, parse_timestamp, utc_now_iso


def test_priority_from_raw_is_case_insensitive() -> None:
    assert Priority.from_raw("HIGH") is Priority.HIGH
    assert Priority.from_raw(" low ") is Priority.LOW
    assert Priority.from_raw(Priority.MEDIUM) is Priority.MEDIUM


def test_priority_from_raw_defaults_to_medium() -> None:
    assert Priority.from_raw(None) is Priority.MEDIUM
    assert Priority.from_raw("") is Priority.MEDIUM
    assert Priority.from_raw("critical") is Priority.MEDIUM


def test_priority_rank_orders_high_first() -> None:
    assert sorted(Priority, key=lambda p: p.rank) == [Priority.HIGH, Priority.MEDIUM, Priority.LOW]


def test_utc_now_iso_format() -> None:
    dt = datetime(2025, 9, 10, 13, 0, 5, 123456, tzinfo=UTC)
    assert utc_now_iso(dt) == "2025-09-10T13:00:05.123Z"


def test_parse_timestamp_variants() -> None:
    assert parse_timestamp("2025-09-10") == datetime(2025, 9, 10, tzinfo=UTC)
    assert parse_timestamp("2025-09-10T20:00:00Z") == datetime(2025, 9, 10, 20, tzinfo=UTC)
    assert parse_timestamp("2025-09-10T20:00:00+07:00") == datetime(2025, 9, 10, 13, tzinfo=UTC)

    local = parse_timestamp("2025-09-10T20:00")
    assert local is not None
    assert local.tzinfo is not None
    assert local == datetime(2025, 9, 10, 20, 0).astimezone()


def test_parse_timestamp_rejects_garbage() -> None:
    for value in (None, "", "   ", "tomorrow", "2025-13-40", 12345):
        assert parse_timestamp(value) is None


def test_is_overdue_only_for_open_tasks_with_past_due() -> None:
    now = datetime(2025, 9, 10, 12, 0, tzinfo=UTC)
    past = utc_now_iso(now - timedelta(hours=1))
    future = utc_now_iso(now + timedelta(hours=1))

    assert Task(id="1", title="a", created_at="", due_date=past).is_overdue(now) is True
    assert Task(id="2", title="b", created_at="", due_date=future).is_overdue(now) is False
    assert Task(id="3", title="c", created_at="", due_date="not a date").is_overdue(now) is False
    assert Task(id="4", title="d", created_at="", due_date=past, completed=True, completed_at=past).is_overdue(now) is False


def test_to_dict_uses_record_field_names() -> None:
    task = Task(
        id="abc",
        title="Essay",
        created_at="2025-09-01T08:00:00.000Z",
        due_date="2025-09-12T20:00:00.000Z",
        priority=Priority.LOW,
        subject="Literature",
        completed=True,
        completed_at="2025-09-02T08:00:00.000Z",
    )

    assert task.to_dict() == {
        "id": "abc",
        "title": "Essay",
        "description": "",
        "dueDate": "2025-09-12T20:00:00.000Z",
        "priority": "Low",
        "subject": "Literature",
        "completed": True,
        "createdAt": "2025-09-01T08:00:00.000Z",
        "completedAt": "2025-09-02T08:00:00.000Z",
    }
    assert Task.from_dict(task.to_dict()) == task


def test_from_dict_defaults_missing_fields() -> None:
    task = Task.from_dict({"title": "Bare"})

    assert task is not None
    assert task.id
    assert task.description == ""
    assert task.due_date == ""
    assert task.priority is Priority.MEDIUM
    assert task.completed is False
    assert task.completed_at is None


def test_from_dict_rejects_entries_without_title() -> None:
    assert Task.from_dict({"id": "x"}) is None
    assert Task.from_dict({"id": "x", "title": None}) is None
    assert Task.from_dict(["title"]) is None


def test_from_dict_drops_completed_at_on_open_task() -> None:
    task = Task.from_dict({"id": "x", "title": "t", "completed": False, "completedAt": "2025-09-02T08:00:00.000Z"})
    assert task.completed_at is None


def test_from_dict_backfills_completed_at() -> None:
    task = Task.from_dict({"id": "x", "title": "t", "completed": True, "createdAt": "2025-09-01T08:00:00.000Z"})
    assert task.completed_at == "2025-09-01T08:00:00.000Z"

    orphan = Task.from_dict({"id": "y", "title": "t", "completed": True})
    assert orphan.completed_at
    assert parse_timestamp(orphan.completed_at) is not None
