# src/study_planner/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends and the remote suggestion service swappable
and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Protocol

from ..tasks.task_models import Priority, Task

TaskSnapshot = tuple[Task, ...]
TaskListener = Callable[[TaskSnapshot], None]


class RecordStorage(Protocol):
    """Named string records (localStorage-like). Implementations may raise."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...


class SuggestionBridge(Protocol):
    """
    Relay to a remote generative text service.

    request() returns the decoded JSON body on success and raises
    BridgeError for any transport, status or decoding failure.
    """

    async def request(self, payload: dict[str, Any]) -> Any: ...


class TaskRepo(Protocol):
    """What presentation surfaces need from the task store."""

    def snapshot(self) -> TaskSnapshot: ...
    def get(self, task_id: str) -> Task | None: ...

    def subscribe(self, listener: TaskListener) -> Callable[[], None]: ...
    def unsubscribe(self, listener: TaskListener) -> None: ...

    def add(
            self,
            title: str,
            due_date: str = "",
            description: str = "",
            priority: Priority | str = Priority.MEDIUM,
            subject: str = "",
    ) -> Task: ...

    def delete(self, task_id: str) -> bool: ...
    def toggle_complete(self, task_id: str) -> Task | None: ...
    def update(self, task_id: str, *, clear_due_date: bool = False, **changes: Any) -> Task | None: ...
    def reorder(self, ids_in_order: Iterable[str]) -> TaskSnapshot: ...
