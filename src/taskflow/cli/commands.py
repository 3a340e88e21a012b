# src/taskflow/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..tasks.task_models import Task, TaskFilter
from ..tasks.views import count_remaining, filter_tasks

CommandHandler = Callable[[AppState, list[str], str], Awaitable[str]]
# handler(state, args, rest): args is the whitespace-split tail, rest is the raw tail.

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

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

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].strip().split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1].strip() if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, rest.split(), rest)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


async def visible_active(state: AppState) -> list[Task]:
    """Active tasks as currently displayed (sorted, then filtered)."""
    tasks = await state.repository.list_active()
    return filter_tasks(tasks, state.ui_state.filter)


def _pick(tasks: list[Task], raw: str | None) -> Task | None:
    """Resolve a 1-based position from the displayed list."""
    if not raw:
        return None
    try:
        idx = int(raw)
    except ValueError:
        return None
    if idx < 1 or idx > len(tasks):
        return None
    return tasks[idx - 1]


def _format_task(i: int, task: Task) -> str:
    mark = "x" if task.completed else " "
    return f"  {i}. [{mark}] {task.title}"


def _render_active(tasks: list[Task], task_filter: TaskFilter, remaining: int) -> str:
    header = f"Tasks ({task_filter.value}, {remaining} left):"
    if not tasks:
        return f"{header}\n  (nothing here)"
    return "\n".join([header, *(_format_task(i, t) for i, t in enumerate(tasks, start=1))])


def _render_deleted(tasks: list[Task]) -> str:
    if not tasks:
        return "Deleted:\n  (empty)"
    return "\n".join(["Deleted:", *(f"  {i}. {t.title}" for i, t in enumerate(tasks, start=1))])


# ---- commands ----


async def cmd_help(state: AppState, args: list[str], rest: str) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str], rest: str) -> str:
    all_active = await state.repository.list_active()
    shown = filter_tasks(all_active, state.ui_state.filter)
    out = _render_active(shown, state.ui_state.filter, count_remaining(all_active))
    if state.ui_state.deleted_panel_open:
        out += "\n" + _render_deleted(await state.repository.list_deleted())
    return out


async def cmd_add(state: AppState, args: list[str], rest: str) -> str:
    task = await state.repository.create_task(rest)
    return f"Added: {task.title}"


async def cmd_edit(state: AppState, args: list[str], rest: str) -> str:
    """
    /edit <n> <new title>
    """
    if len(args) < 2:
        return "Usage: /edit <n> <new title>"
    task = _pick(await visible_active(state), args[0])
    if task is None:
        return f"No task at position {args[0]}. Use /list."
    new_title = rest.split(maxsplit=1)[1]
    updated = await state.repository.update_task(task.id, title=new_title)
    return f"Renamed: {updated.title}"


async def cmd_done(state: AppState, args: list[str], rest: str) -> str:
    task = _pick(await visible_active(state), args[0] if args else None)
    if task is None:
        return "Usage: /done <n> (position from /list)"
    updated = await state.repository.toggle_completed(task.id)
    return f"{'Completed' if updated.completed else 'Reopened'}: {updated.title}"


async def cmd_delete(state: AppState, args: list[str], rest: str) -> str:
    task = _pick(await visible_active(state), args[0] if args else None)
    if task is None:
        return "Usage: /del <n> (position from /list)"
    await state.repository.soft_delete(task.id)
    return f"Deleted: {task.title} (use /deleted and /restore to undo)"


async def cmd_deleted(state: AppState, args: list[str], rest: str) -> str:
    return _render_deleted(await state.repository.list_deleted())


async def cmd_restore(state: AppState, args: list[str], rest: str) -> str:
    task = _pick(await state.repository.list_deleted(), args[0] if args else None)
    if task is None:
        return "Usage: /restore <n> (position from /deleted)"
    await state.repository.restore(task.id)
    return f"Restored: {task.title}"


async def cmd_purge(state: AppState, args: list[str], rest: str) -> str:
    n = await state.repository.purge_deleted()
    if not n:
        return "Nothing to purge."
    return f"Permanently removed {n} task(s)."


async def cmd_filter(state: AppState, args: list[str], rest: str) -> str:
    """
    /filter                       -> show current filter
    /filter all|active|completed  -> change filter
    """
    if not args:
        return f"Filter is '{state.ui_state.filter.value}'. Use /filter all|active|completed."
    raw = args[0].lower()
    if raw not in {f.value for f in TaskFilter}:
        return "Usage: /filter all|active|completed"
    state.ui_state.set_filter(raw)
    return f"Filter: {state.ui_state.filter.value}"


async def cmd_panel(state: AppState, args: list[str], rest: str) -> str:
    """
    /panel         -> toggle the deleted panel
    /panel open    -> force open
    /panel close   -> force closed
    """
    force: bool | None = None
    if args:
        arg = args[0].lower()
        if arg in ("open", "on", "show"):
            force = True
        elif arg in ("close", "off", "hide"):
            force = False
        else:
            return "Usage: /panel [open|close]"
    is_open = state.ui_state.toggle_deleted_panel(force)
    return f"Deleted panel {'open' if is_open else 'closed'}."


async def cmd_status(state: AppState, args: list[str], rest: str) -> str:
    active = await state.repository.list_active()
    deleted = await state.repository.list_deleted()
    return (
        "Status:\n"
        f"  Storage: {state.repository.mode.value}\n"
        f"  Active: {len(active)} ({count_remaining(active)} left)\n"
        f"  Deleted: {len(deleted)}\n"
        f"  Filter: {state.ui_state.filter.value}\n"
        f"  Deleted panel: {'open' if state.ui_state.deleted_panel_open else 'closed'}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks (filtered).", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title>. Plain text also adds.")
registry.register("edit", cmd_edit, help_text="Rename a task: /edit <n> <title>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["toggle"])
registry.register("del", cmd_delete, help_text="Move a task to Deleted: /del <n>.", aliases=["rm"])
registry.register("deleted", cmd_deleted, help_text="Show deleted tasks.")
registry.register("restore", cmd_restore, help_text="Restore a deleted task: /restore <n>.")
registry.register("purge", cmd_purge, help_text="Permanently remove all deleted tasks.")
registry.register("filter", cmd_filter, help_text="Set filter: /filter all|active|completed.")
registry.register("panel", cmd_panel, help_text="Toggle deleted panel: /panel [open|close].")
registry.register("status", cmd_status, help_text="Show storage mode and counts.")
