# src/study_planner/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable
from datetime import date, datetime

from ..assistant.analyzer import analyze_tasks, format_analysis_message
from ..assistant.models import AISuggestion
from ..assistant.suggester import suggest_schedule
from ..core.state import AppState
from ..tasks import reports
from ..tasks.task_api import compose_due_date, promote_suggestion
from ..tasks.task_models import Priority, Task, parse_timestamp
from ..tasks.task_queries import (
    SORT_KEYS,
    STATUS_FILTERS,
    TaskStatus,
    calendar_buckets,
    filter_tasks,
    sort_tasks,
    task_status,
    tasks_due_on,
)

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Arguments are shell-split, so quoted titles keep their spaces.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Anything else is sent to the assistant.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting helpers ----


def _now() -> datetime:
    return datetime.now().astimezone()


def _local(value: str | None) -> str:
    dt = parse_timestamp(value)
    return dt.astimezone().strftime("%Y-%m-%d %H:%M") if dt else ""


def format_task_line(index: int, task: Task, now: datetime) -> str:
    mark = "x" if task.completed else " "
    parts = [f"{index}. [{mark}] {task.title or '<untitled>'}", f"({task.priority.value})"]
    due = task.due
    if due is not None:
        local = due.astimezone()
        day = "Today" if local.date() == now.astimezone().date() else local.strftime("%Y-%m-%d")
        parts.append(f"due {day} {local.strftime('%H:%M')}")
    if task.subject:
        parts.append(f"#{task.subject}")
    if task_status(task, now) is TaskStatus.OVERDUE:
        parts.append("OVERDUE")
    parts.append(f"[{task.id[:8]}]")
    return " ".join(parts)


def format_suggestions(suggestions: list[AISuggestion]) -> str:
    lines: list[str] = []
    for i, s in enumerate(suggestions, start=1):
        extra: list[str] = []
        if s.priority is not None:
            extra.append(s.priority.value)
        if s.estimated_minutes is not None:
            extra.append(f"{s.estimated_minutes} min")
        slot = _local(s.suggested_slot)
        if slot:
            extra.append(slot)
        suffix = f" ({', '.join(extra)})" if extra else ""
        lines.append(f"  {i}. {s.title}{suffix}")
        if s.description:
            lines.append(f"     {s.description}")
    if lines:
        lines.append("Use /accept N to add a suggestion as a task.")
    return "\n".join(lines)


# ---- argument helpers ----


def _split_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate free words from key=value options."""
    words: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key.isidentifier():
            opts[key.lower()] = value
        else:
            words.append(a)
    return words, opts


def resolve_task(state: AppState, ref: str) -> Task | None:
    """A 1-based position in the current list, or a unique prefix of a task id."""
    tasks = state.task_store.snapshot()
    if ref.isdigit():
        n = int(ref)
        if 1 <= n <= len(tasks):
            return tasks[n - 1]
    matches = [t for t in tasks if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def _parse_priority(raw: str | None) -> Priority | None:
    if raw is None:
        return None
    s = raw.strip().lower()
    for p in Priority:
        if p.value.lower() == s:
            return p
    raise ValueError(f"unknown priority {raw!r} (use high, medium or low)")


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                      -> all tasks in store order
    /list active|completed     -> filtered
    /list all priority         -> sorted (date | priority | title)
    """
    status = "all"
    sort_by: str | None = None
    for a in args:
        a = a.lower()
        if a in STATUS_FILTERS:
            status = a
        elif a in SORT_KEYS:
            sort_by = a
        else:
            return f"Usage: /list [{'|'.join(STATUS_FILTERS)}] [{'|'.join(SORT_KEYS)}]"

    snapshot = state.task_store.snapshot()
    position = {t.id: i for i, t in enumerate(snapshot, start=1)}
    tasks = filter_tasks(snapshot, status)
    if sort_by:
        tasks = sort_tasks(tasks, sort_by)
    if not tasks:
        return "No tasks."

    now = _now()
    lines = [format_task_line(position[t.id], t, now) for t in tasks]
    active = sum(1 for t in snapshot if not t.completed)
    lines.append(f"{len(tasks)} shown, {active} active, {len(snapshot) - active} completed.")
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add "Title" due=YYYY-MM-DD time=HH:MM priority=high subject=Math desc="..." """
    words, opts = _split_options(args)
    title = " ".join(words).strip()
    if not title:
        return "Usage: /add <title> [due=YYYY-MM-DD] [time=HH:MM] [priority=high|medium|low] [subject=...] [desc=...]"
    try:
        due_date = compose_due_date(opts.get("due", ""), opts.get("time", ""))
        priority = _parse_priority(opts.get("priority")) or Priority.MEDIUM
    except ValueError as e:
        return f"Invalid input: {e}"

    task = state.task_store.add(
        title,
        due_date=due_date,
        description=opts.get("desc", ""),
        priority=priority,
        subject=opts.get("subject", ""),
    )
    return f"Added: {format_task_line(len(state.task_store), task, _now())}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n|id>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."
    toggled = state.task_store.toggle_complete(task.id)
    if toggled is None:
        return f"No task {args[0]!r}."
    return f"{'Completed' if toggled.completed else 'Reopened'}: {toggled.title}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <n|id>"
    task = resolve_task(state, args[0])
    if task is None or not state.task_store.delete(task.id):
        return f"No task {args[0]!r}."
    return f"Deleted: {task.title}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <n|id> title=... due=YYYY-MM-DD time=HH:MM priority=... subject=... desc=...
    /edit <n|id> due=none     -> remove the due date
    """
    if len(args) < 2:
        return "Usage: /edit <n|id> key=value ..."
    task = resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."

    words, opts = _split_options(args[1:])
    if words:
        return f"Unexpected arguments: {' '.join(words)} (use key=value)."

    changes: dict[str, object] = {}
    clear_due = False
    try:
        if "title" in opts:
            if not opts["title"].strip():
                return "Title cannot be empty."
            changes["title"] = opts["title"]
        if "desc" in opts:
            changes["description"] = opts["desc"]
        if "subject" in opts:
            changes["subject"] = opts["subject"]
        if "priority" in opts:
            changes["priority"] = _parse_priority(opts["priority"])
        if opts.get("due", "").lower() == "none":
            clear_due = True
        elif "due" in opts:
            changes["due_date"] = compose_due_date(opts["due"], opts.get("time", ""))
    except ValueError as e:
        return f"Invalid input: {e}"

    updated = state.task_store.update(task.id, clear_due_date=clear_due, **changes)
    if updated is None:
        return f"No task {args[0]!r}."
    return f"Updated: {updated.title}"


def cmd_move(state: AppState, args: list[str]) -> str:
    """/move <n|id> <position> -> reorder keeping every task."""
    if len(args) != 2 or not args[1].isdigit():
        return "Usage: /move <n|id> <position>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."
    ids = [t.id for t in state.task_store.snapshot() if t.id != task.id]
    pos = max(1, min(int(args[1]), len(ids) + 1))
    ids.insert(pos - 1, task.id)
    state.task_store.reorder(ids)
    return f"Moved {task.title!r} to position {pos}."


def cmd_calendar(state: AppState, args: list[str]) -> str:
    """/calendar [YYYY-MM-DD] -> overdue/upcoming counts and open tasks due that day."""
    now = _now()
    try:
        day = date.fromisoformat(args[0]) if args else now.date()
    except ValueError:
        return "Usage: /calendar [YYYY-MM-DD]"

    snapshot = state.task_store.snapshot()
    buckets = calendar_buckets(snapshot, now)
    lines = [
        f"Scheduled: {len(buckets.scheduled)}  Overdue: {len(buckets.overdue)}  Upcoming: {len(buckets.upcoming)}",
        f"Due on {day.isoformat()}:",
    ]
    position = {t.id: i for i, t in enumerate(snapshot, start=1)}
    due = tasks_due_on(snapshot, day)
    lines.extend(format_task_line(position[t.id], t, now) for t in due)
    if not due:
        lines.append("  (nothing)")
    return "\n".join(lines)


def cmd_stats(state: AppState, args: list[str]) -> str:
    return format_analysis_message(analyze_tasks(state.task_store.snapshot()))


def cmd_report(state: AppState, args: list[str]) -> str:
    """/report [week|month] -> analytics overview."""
    span = (args[0].lower() if args else "week")
    if span not in ("week", "month"):
        return "Usage: /report [week|month]"
    days = 7 if span == "week" else 30

    tasks = state.task_store.snapshot()
    dist = reports.priority_distribution(tasks)
    with_due, without_due = reports.due_date_coverage(tasks)
    trend = reports.completion_trend(tasks, days=days)
    study = reports.study_breakdown(tasks)

    lines = [
        "Priority: " + ", ".join(f"{p.value} {n}" for p, n in dist.items()),
        f"Due dates: {with_due} scheduled, {without_due} unscheduled",
        f"Completed per day (last {days}): {' '.join(str(n) for n in trend)}",
        f"Study tasks: {study.total} ({study.completed} done, {study.pending} pending)",
    ]
    for subject, n in sorted(study.by_subject.items(), key=lambda kv: (-kv[1], kv[0])):
        lines.append(f"  {subject}: {n}")
    lines.append(f"Average days between due date and completion: {reports.average_completion_days(tasks)}")
    lines.append(f"Productivity score: {reports.productivity_score(tasks)}/100")
    return "\n".join(lines)


def cmd_suggest(state: AppState, args: list[str]) -> str:
    """Local schedule suggestions (no remote call)."""
    suggestions = suggest_schedule(state.task_store.snapshot())
    state.last_suggestions = suggestions
    if not suggestions:
        return "Nothing to schedule right now."
    return "Schedule suggestions:\n" + format_suggestions(suggestions)


def cmd_accept(state: AppState, args: list[str]) -> str:
    """/accept N [subject=...] -> add suggestion N from the last answer as a task."""
    words, opts = _split_options(args)
    if len(words) != 1 or not words[0].isdigit():
        return "Usage: /accept N [subject=...]"
    n = int(words[0])
    if not 1 <= n <= len(state.last_suggestions):
        return f"No suggestion #{n}."
    suggestion = state.last_suggestions[n - 1]
    task = promote_suggestion(state.task_store, suggestion, subject=opts.get("subject", ""))
    return f"Added: {task.title}"


def cmd_mood(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Mood is {state.mood!r}. Use /mood <tired|neutral|focused|energetic|...>."
    state.mood = args[0].strip().lower() or "neutral"
    return f"Mood set to {state.mood!r}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List tasks: /list [all|active|completed] [date|priority|title].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add \"Title\" due=YYYY-MM-DD time=HH:MM priority=high subject=...")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n|id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <n|id>.", aliases=["rm"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n|id> key=value ... (due=none clears).")
registry.register("move", cmd_move, help_text="Reorder: /move <n|id> <position>.")
registry.register("calendar", cmd_calendar, help_text="Calendar view: /calendar [YYYY-MM-DD].", aliases=["cal"])
registry.register("stats", cmd_stats, help_text="Task statistics.")
registry.register("report", cmd_report, help_text="Analytics: /report [week|month].")
registry.register("suggest", cmd_suggest, help_text="Local schedule suggestions.")
registry.register("accept", cmd_accept, help_text="Add a suggestion as a task: /accept N [subject=...].")
registry.register("mood", cmd_mood, help_text="Show or set mood used by the assistant.")
