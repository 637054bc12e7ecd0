# src/taskdesk/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, cast

from ..core.state import AppState
from ..tasks.task_models import TaskFilter, TaskPriority, TaskStatus
from ..ui.render import render_board, render_task_list

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

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

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

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


def _resolve_task_id(state: AppState, raw: str) -> Any:
    """Map user-typed text back to the server's id value (ids may be str or int)."""
    for t in state.controller.tasks:
        if str(t.id) == raw:
            return t.id
    return raw


def _choices(enum_cls: Any) -> str:
    return "|".join(m.value for m in enum_cls)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    app_name = str(getattr(state.settings, "app_name", "Task Manager"))
    return render_board(state.controller, app_name=app_name)


def cmd_title(state: AppState, args: list[str]) -> str:
    draft = state.controller.update_draft(title=" ".join(args))
    return f"Draft title: {draft.title or '-'}"


def cmd_desc(state: AppState, args: list[str]) -> str:
    draft = state.controller.update_draft(description=" ".join(args))
    return f"Draft description: {draft.description or '-'}"


def cmd_priority(state: AppState, args: list[str]) -> str:
    if len(args) != 1 or args[0].lower() not in {p.value for p in TaskPriority}:
        return f"Usage: /priority {_choices(TaskPriority)}"
    draft = state.controller.update_draft(priority=args[0].lower())
    return f"Draft priority: {draft.priority}"


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add            -> submit the current draft
    /add <title>    -> set the draft title, then submit
    """
    if args:
        state.controller.update_draft(title=" ".join(args))

    # Required-field check lives on the input side; the controller never validates.
    if not state.controller.draft.title.strip():
        return "Title is required. Use /title <text> or /add <title>."

    state.spawn(state.controller.submit_draft())
    return f"Adding task: {state.controller.draft.title}"


def cmd_filter(state: AppState, args: list[str]) -> str:
    if len(args) != 1 or args[0].lower() not in {f.value for f in TaskFilter}:
        return f"Usage: /filter {_choices(TaskFilter)}"
    state.controller.set_filter(args[0].lower())
    return render_task_list(state.controller)


def cmd_status(state: AppState, args: list[str]) -> str:
    if len(args) != 2 or args[1].lower() not in {s.value for s in TaskStatus}:
        return f"Usage: /status <id> {_choices(TaskStatus)}"
    task_id = _resolve_task_id(state, args[0])
    state.spawn(state.controller.change_status(task_id, args[1].lower()))
    return f"Updating task {task_id} -> {args[1].lower()}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /delete <id>"
    task_id = _resolve_task_id(state, args[0])
    state.spawn(state.controller.delete(task_id))
    return f"Deleting task {task_id}"


def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Reloading tasks...")
    state.spawn(state.controller.refresh())
    return "Reload requested."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task board.", aliases=["ls"])
registry.register("title", cmd_title, help_text="Set the new-task title: /title <text>.")
registry.register("desc", cmd_desc, help_text="Set the new-task description: /desc <text>.")
registry.register("priority", cmd_priority, help_text="Set the new-task priority: /priority low|medium|high.")
registry.register("add", cmd_add, help_text="Create a task from the draft: /add [title].")
registry.register(
    "filter", cmd_filter, help_text="Filter by status: /filter all|pending|in-progress|completed."
)
registry.register("status", cmd_status, help_text="Change a task's status: /status <id> <status>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("reload", cmd_reload, help_text="Fetch the full task list again.")
