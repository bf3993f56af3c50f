# src/salesboard/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import DerivedTask, Task, TaskStatus, validate_task_input
from .bootstrap import export_tasks

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

ADD_USAGE = "Usage: /add <title> | <revenue> | <hours> | <priority> | <status> [| notes]"
EDIT_USAGE = "Usage: /edit <id> field=value ... (fields: title, revenue, hours, priority, status, notes)"


class CommandRegistry:
    """Simple slash-command registry used by the console connector."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        # /add keeps its raw tail ("|" separated fields may contain spaces).
        args = [rest] if name == "add" and rest else rest.split()

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _fmt_money(value: float) -> str:
    return f"${value:,.2f}"


def _fmt_roi(value: float | None) -> str:
    return "n/a" if value is None else f"{value:,.2f}"


def _fmt_row(pos: int, item: DerivedTask) -> str:
    t = item.task
    return (
        f"{pos:>3}. [{t.id}] {t.title} | {_fmt_money(t.revenue)} / {t.time_taken:g}h"
        f" | ROI {_fmt_roi(item.roi)} | {t.priority.value} | {t.status.value}"
    )


def _fmt_task(t: Task) -> str:
    lines = [
        f"Task {t.id}",
        f"  Title:     {t.title}",
        f"  Revenue:   {_fmt_money(t.revenue)}",
        f"  Time:      {t.time_taken:g}h",
        f"  Priority:  {t.priority.value}",
        f"  Status:    {t.status.value}",
        f"  Created:   {t.created_at}",
        f"  Completed: {t.completed_at or '-'}",
    ]
    if t.notes:
        lines.append(f"  Notes:     {t.notes}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.store
    source = getattr(state.settings, "tasks_source", "") or "(synthetic)"
    lines = [
        "Status:",
        f"  Tasks: {len(store.tasks)}",
        f"  Source: {source}",
        f"  Loading: {'yes' if store.loading else 'no'}",
    ]
    if store.error:
        lines.append(f"  Load error: {store.error}")
    if store.last_deleted is not None:
        lines.append(f"  Undo available: {store.last_deleted.title!r} (/undo or /dismiss)")
    return "\n".join(lines)


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list      -> top 20 tasks by ROI
    /list N    -> top N
    /list all  -> everything
    """
    ranked = state.store.derived_sorted
    if not ranked:
        return "No tasks."

    limit: int | None = 20
    if args:
        if args[0].lower() == "all":
            limit = None
        else:
            try:
                limit = max(1, int(args[0]))
            except ValueError:
                return "Usage: /list [N|all]"

    shown = ranked if limit is None else ranked[:limit]
    lines = [f"Tasks ranked by ROI ({len(shown)} of {len(ranked)}):"]
    lines.extend(_fmt_row(i, item) for i, item in enumerate(shown, start=1))
    return "\n".join(lines)


def cmd_metrics(state: AppState, args: list[str]) -> str:
    m = state.store.metrics
    return (
        "Metrics:\n"
        f"  Total revenue:    {_fmt_money(m.total_revenue)}\n"
        f"  Total time:       {m.total_time_taken:g}h\n"
        f"  Time efficiency:  {m.time_efficiency_pct:.1f}%\n"
        f"  Revenue per hour: {_fmt_money(m.revenue_per_hour)}\n"
        f"  Average ROI:      {m.average_roi:,.2f}\n"
        f"  Grade:            {m.performance_grade}"
    )


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    task = state.store.get_task(args[0])
    if task is None:
        return f"No task with id {args[0]}."
    return _fmt_task(task)


def cmd_add(state: AppState, args: list[str]) -> str:
    if not args:
        return ADD_USAGE

    fields = [f.strip() for f in args[0].split("|")]
    if len(fields) < 5:
        return ADD_USAGE

    title, revenue, hours, priority, status = fields[:5]
    notes = fields[5] if len(fields) > 5 and fields[5] else None

    errors = validate_task_input(
        title=title,
        revenue=revenue,
        time_taken=hours,
        priority=priority,
        status=status,
        existing_titles=state.store.existing_titles(),
    )
    if errors:
        return "Cannot add task:\n" + "\n".join(f"  - {e}" for e in errors)

    task_id = state.store.add_task(
        title=title,
        revenue=float(revenue),
        time_taken=float(hours),
        priority=priority,
        status=status,
        notes=notes,
    )
    return f"Added task {task_id}: {title}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return EDIT_USAGE

    task = state.store.get_task(args[0])
    if task is None:
        return f"No task with id {args[0]}."

    patch: dict[str, str] = {}
    for pair in args[1:]:
        key, sep, value = pair.partition("=")
        if not sep:
            return EDIT_USAGE
        key = key.strip().lower()
        if key == "hours":
            key = "time_taken"
        patch[key] = value.replace("_", " ") if key in ("status", "title", "notes") else value

    errors = validate_task_input(
        title=patch.get("title", task.title),
        revenue=patch.get("revenue", task.revenue),
        time_taken=patch.get("time_taken", task.time_taken),
        priority=patch.get("priority", task.priority.value),
        status=patch.get("status", task.status.value),
        existing_titles=[t for t in state.store.existing_titles() if t != task.title],
        current_title=task.title,
    )
    if errors:
        return "Cannot update task:\n" + "\n".join(f"  - {e}" for e in errors)

    state.store.update_task(task.id, patch)
    return f"Updated task {task.id}."


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    if not state.store.update_task(args[0], status=TaskStatus.DONE):
        return f"No task with id {args[0]}."
    return f"Task {args[0]} marked Done."


def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /delete <id>"
    if not state.store.delete_task(args[0]):
        return f"No task with id {args[0]}."
    if emit is not None:
        emit("Use /undo to restore it, or /dismiss to forget it.")
    return f"Deleted task {args[0]}."


def cmd_undo(state: AppState, args: list[str]) -> str:
    last = state.store.last_deleted
    if last is None:
        return "Nothing to undo."
    if not state.store.undo_delete():
        return f"Could not restore {last.title!r}."
    return f"Restored task {last.id}: {last.title}"


def cmd_dismiss(state: AppState, args: list[str]) -> str:
    state.store.clear_last_deleted()
    return "Undo buffer cleared."


def cmd_export(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /export <path>"
    try:
        n = export_tasks(state, args[0])
    except OSError as e:
        logger.warning("Export to %s failed: %s", args[0], e)
        return f"Export failed: {e}"
    return f"Exported {n} tasks to {args[0]}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task count, source and load state.")
registry.register("list", cmd_list, help_text="Ranked tasks: /list [N|all].", aliases=["ls"])
registry.register("metrics", cmd_metrics, help_text="Show aggregate metrics and grade.")
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("add", cmd_add, help_text="Add a task: /add title | revenue | hours | priority | status [| notes].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> field=value ...")
registry.register("done", cmd_done, help_text="Mark a task Done: /done <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("undo", cmd_undo, help_text="Restore the last deleted task.")
registry.register("dismiss", cmd_dismiss, help_text="Forget the last deleted task.")
registry.register("export", cmd_export, help_text="Write tasks to a JSON file: /export <path>.")
