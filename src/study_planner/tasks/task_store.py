# src/study_planner/tasks/task_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import replace
from typing import Any

from ..core.ports import RecordStorage, TaskListener, TaskSnapshot
from .task_models import Priority, Task, new_task_id, utc_now_iso

logger = logging.getLogger(__name__)

# Fields callers may change through update(). id / created_at / completed_at are owned by the store.
_UPDATABLE_FIELDS = frozenset({"title", "description", "due_date", "priority", "subject", "completed"})


class TaskStore:
    """
    Single source of truth for the task collection.

    The composition root creates one store and injects it into every
    consumer (console, commands, assistant helpers). Consumers read
    immutable snapshots and mutate only through the operations below.

    Consistency:
    - every mutation replaces the in-memory snapshot, writes the durable
      record, then notifies listeners, all before returning
    - durable writes are best-effort: a failed write is logged and the
      in-memory state stays authoritative for the session
    - listeners are called synchronously in subscription order
    """

    def __init__(self, storage: RecordStorage, *, record_key: str = "tasks") -> None:
        self._storage = storage
        self._record_key = record_key
        self._tasks: TaskSnapshot = ()
        self._listeners: list[TaskListener] = []

    # ---- snapshot access ----

    def snapshot(self) -> TaskSnapshot:
        return self._tasks

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    # ---- subscriptions ----

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: TaskListener) -> None:
        self._listeners = [fn for fn in self._listeners if fn is not listener]

    def _broadcast(self) -> None:
        snapshot = self._tasks
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Task listener %r failed", listener)

    # ---- persistence ----

    def _read_record(self) -> list[Task]:
        try:
            raw = self._storage.get_item(self._record_key)
        except Exception:
            logger.exception("Failed to read tasks record key=%s", self._record_key)
            return []

        if not raw:
            return []

        try:
            data = json.loads(raw)
        except ValueError:
            logger.exception("Tasks record key=%s is not valid JSON; starting empty", self._record_key)
            return []

        if not isinstance(data, list):
            logger.error("Tasks record key=%s is not a JSON array; starting empty", self._record_key)
            return []

        out: list[Task] = []
        seen: set[str] = set()
        for entry in data:
            task = Task.from_dict(entry)
            if task is None:
                logger.warning("Skipping unusable task entry: %r", entry)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%s", task.id)
                continue
            seen.add(task.id)
            out.append(task)
        return out

    def _persist(self) -> bool:
        try:
            payload = json.dumps([t.to_dict() for t in self._tasks], ensure_ascii=False)
            self._storage.set_item(self._record_key, payload)
            return True
        except Exception:
            logger.exception("Failed to save tasks record key=%s", self._record_key)
            return False

    def _commit(self, tasks: Iterable[Task]) -> None:
        self._tasks = tuple(tasks)
        self._persist()
        self._broadcast()

    # ---- public API ----

    def load(self) -> TaskSnapshot:
        """Replace the in-memory collection with the durable record (empty on missing/corrupt data)."""
        self._tasks = tuple(self._read_record())
        logger.info("TaskStore loaded key=%s total=%d", self._record_key, len(self._tasks))
        self._broadcast()
        return self._tasks

    def add(
            self,
            title: str,
            due_date: str = "",
            description: str = "",
            priority: Priority | str = Priority.MEDIUM,
            subject: str = "",
    ) -> Task:
        """
        Append a new open task. The title is stored as given; input
        validation belongs to the caller.
        """
        task = Task(
            id=self._fresh_id(),
            title=title,
            created_at=utc_now_iso(),
            description=description or "",
            due_date=due_date or "",
            priority=Priority.from_raw(priority),
            subject=subject or "",
        )
        self._commit((*self._tasks, task))
        logger.debug("Task added id=%s title=%r due=%s", task.id, task.title, task.due_date)
        return task

    def delete(self, task_id: str) -> bool:
        remaining = tuple(t for t in self._tasks if t.id != task_id)
        if len(remaining) == len(self._tasks):
            logger.debug("delete: task id=%s not found", task_id)
            return False
        self._commit(remaining)
        logger.debug("Task deleted id=%s", task_id)
        return True

    def toggle_complete(self, task_id: str) -> Task | None:
        current = self.get(task_id)
        if current is None:
            logger.debug("toggle_complete: task id=%s not found", task_id)
            return None
        toggled = _with_completion(current, not current.completed)
        self._replace(toggled)
        logger.debug("Task id=%s completed=%s", task_id, toggled.completed)
        return toggled

    def update(self, task_id: str, *, clear_due_date: bool = False, **changes: Any) -> Task | None:
        """
        Merge changes into a task.

        - due_date=None or "" keeps the existing due date; pass
          clear_due_date=True to remove it
        - completed follows the same completed_at rule as toggle_complete
        - id, created_at and completed_at are never taken from changes
        """
        current = self.get(task_id)
        if current is None:
            logger.debug("update: task id=%s not found", task_id)
            return None

        ignored = set(changes) - _UPDATABLE_FIELDS
        if ignored:
            logger.debug("update: ignoring non-updatable fields %s for id=%s", sorted(ignored), task_id)

        fields: dict[str, Any] = {}
        for name in ("title", "description", "subject"):
            if name in changes and changes[name] is not None:
                fields[name] = str(changes[name])
        if changes.get("priority") is not None:
            fields["priority"] = Priority.from_raw(changes["priority"])
        if clear_due_date:
            fields["due_date"] = ""
        elif changes.get("due_date"):
            fields["due_date"] = str(changes["due_date"])

        updated = replace(current, **fields) if fields else current
        if "completed" in changes and changes["completed"] is not None:
            updated = _with_completion(updated, bool(changes["completed"]))

        if updated == current:
            return current

        self._replace(updated)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(set(fields) | ({"completed"} & set(changes))))
        return updated

    def reorder(self, ids_in_order: Iterable[str]) -> TaskSnapshot:
        """
        Rewrite the collection order to follow ids_in_order.

        Unknown ids are ignored and repeated ids count once. Tasks whose id
        is not listed are DROPPED from the collection; callers must pass
        the full id list to only change order.
        """
        by_id = {t.id: t for t in self._tasks}
        ordered: list[Task] = []
        seen: set[str] = set()
        for tid in ids_in_order:
            task = by_id.get(tid)
            if task is None or tid in seen:
                continue
            seen.add(tid)
            ordered.append(task)

        dropped = len(self._tasks) - len(ordered)
        if dropped:
            logger.warning("reorder dropped %d task(s) not present in the id list", dropped)
        self._commit(ordered)
        return self._tasks

    # ---- helpers ----

    def _replace(self, task: Task) -> None:
        self._commit(task if t.id == task.id else t for t in self._tasks)

    def _fresh_id(self) -> str:
        existing = {t.id for t in self._tasks}
        tid = new_task_id()
        while tid in existing:
            tid = new_task_id()
        return tid


def _with_completion(task: Task, completed: bool) -> Task:
    if task.completed == completed:
        return task
    if completed:
        return replace(task, completed=True, completed_at=utc_now_iso())
    return replace(task, completed=False, completed_at=None)
