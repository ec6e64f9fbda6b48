# src/unitrack/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..tasks.task_controller import Outcome
from ..tasks.task_models import FilterMode, Task, TaskFields
from .render import render_stats, render_task_detail, render_task_list

ConfirmPrompt = Callable[[str], bool]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], ConfirmPrompt | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

FIELD_NAMES = ("title", "subject", "date", "priority", "description")
SAVE_FAILED = "Warning: the change could not be saved to disk; it will be lost on exit."


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
        confirm: ConfirmPrompt | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
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
            return h3(state, args, confirm)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _now() -> datetime:
    return datetime.now().astimezone()


def parse_field_args(args: list[str]) -> dict[str, str]:
    """Turn ["title=Essay", "priority=high"] into a dict. Raises ValueError on bad tokens."""
    out: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        key = key.strip().lower()
        if not sep or key not in FIELD_NAMES:
            raise ValueError(
                f"unexpected argument {arg!r} (use key=value with keys: {', '.join(FIELD_NAMES)})"
            )
        out[key] = value
    return out


def _fields_from(values: dict[str, str], base: Task | None = None) -> TaskFields:
    if base is not None:
        merged = {
            "title": base.title,
            "subject": base.subject,
            "date": base.date.isoformat(),
            "priority": base.priority.value,
            "description": base.description,
        }
        merged.update(values)
        values = merged
    missing = [k for k in ("title", "subject", "date", "priority") if not values.get(k)]
    if missing:
        raise ValueError(f"missing required field(s): {', '.join(missing)}")
    return TaskFields.build(
        title=values["title"],
        subject=values["subject"],
        date=values["date"],
        priority=values["priority"],
        description=values.get("description", ""),
    )


def _parse_id(args: list[str], usage: str) -> int | str:
    if len(args) != 1:
        return usage
    raw = args[0].lstrip("#")
    try:
        return int(raw)
    except ValueError:
        return f"Not a task id: {args[0]!r}. {usage}"


def _with_save_status(message: str, outcome: Outcome) -> str:
    if outcome.persisted:
        return message
    return f"{message}\n{SAVE_FAILED}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title="Essay draft" subject=Lit date=2099-01-01 priority=high [description=...]
    """
    if not args:
        return "Usage: /add title=... subject=... date=YYYY-MM-DD priority=low|medium|high [description=...]"
    try:
        fields = _fields_from(parse_field_args(args))
    except ValueError as e:
        return f"Invalid task: {e}."
    outcome = state.controller.create(fields)
    if outcome.task is None:
        return "Task could not be added."
    return _with_save_status(f"Task added (#{outcome.task.id}).", outcome)


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id>  -> enter edit mode for a task and show its fields
    """
    parsed = _parse_id(args, "Usage: /edit <id>")
    if isinstance(parsed, str):
        return parsed
    task = state.controller.begin_edit(parsed)
    if task is None:
        return f"No task with id #{parsed}."
    return (
        f"Editing:\n{render_task_detail(task)}\n"
        "Use /save key=value ... to apply changes (other fields keep their value), "
        "or /cancel."
    )


def cmd_save(state: AppState, args: list[str]) -> str:
    """
    /save key=value ...  -> commit the edit in progress, or add a new task when not editing
    """
    controller = state.controller
    editing_id = controller.editing_task_id
    try:
        values = parse_field_args(args)
        base = state.store.find_by_id(editing_id) if editing_id is not None else None
        if editing_id is not None and base is None:
            # The task disappeared under us; leave edit mode rather than create a new one.
            controller.cancel_edit()
            return f"Task #{editing_id} no longer exists; edit cancelled."
        fields = _fields_from(values, base=base)
    except ValueError as e:
        return f"Invalid task: {e}."

    outcome = controller.submit(fields)
    verb = "updated" if editing_id is not None else "added"
    if outcome.task is None:
        return f"Task could not be {verb}."
    return _with_save_status(f"Task {verb} (#{outcome.task.id}).", outcome)


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if not state.controller.is_editing:
        return "Nothing is being edited."
    state.controller.cancel_edit()
    return "Edit cancelled."


def cmd_done(state: AppState, args: list[str]) -> str:
    """
    /done <id>  -> toggle completion (completed <-> pending)
    """
    parsed = _parse_id(args, "Usage: /done <id>")
    if isinstance(parsed, str):
        return parsed
    outcome = state.controller.toggle_completion(parsed)
    if outcome.task is None:
        return f"No task with id #{parsed}."
    msg = "Task completed!" if outcome.task.completed else "Task marked as pending."
    return _with_save_status(msg, outcome)


def cmd_rm(state: AppState, args: list[str], confirm: ConfirmPrompt | None = None) -> str:
    """
    /rm <id> [-y]  -> delete a task (asks for confirmation unless -y)
    """
    assume_yes = "-y" in args
    rest = [a for a in args if a != "-y"]
    parsed = _parse_id(rest, "Usage: /rm <id> [-y]")
    if isinstance(parsed, str):
        return parsed

    task = state.store.find_by_id(parsed)
    if task is None:
        return f"No task with id #{parsed}."

    needs_confirm = bool(getattr(state.settings, "confirm_delete", True)) and not assume_yes
    if needs_confirm:
        if confirm is None:
            return "Deletion needs confirmation here; repeat with /rm <id> -y."
        if not confirm(f"Delete task #{task.id} '{task.title}'?"):
            return "Deletion cancelled."

    outcome = state.controller.delete(parsed)
    return _with_save_status("Task deleted.", outcome)


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list [all|pending|completed|overdue|high]
    """
    try:
        mode = FilterMode.parse(args[0]) if args else state.current_filter
    except ValueError as e:
        return f"{e}."
    now = _now()
    return render_task_list(state.controller.tasks(mode, now.date()), mode, now)


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter <mode>  -> change the default view used by /list
    """
    if not args:
        return f"Current filter: {state.current_filter.value}."
    try:
        state.current_filter = FilterMode.parse(args[0])
    except ValueError as e:
        return f"{e}."
    return cmd_list(state, [])


def cmd_stats(state: AppState, args: list[str]) -> str:
    return render_stats(state.controller.stats(_now().date()))


def cmd_show(state: AppState, args: list[str]) -> str:
    parsed = _parse_id(args, "Usage: /show <id>")
    if isinstance(parsed, str):
        return parsed
    task = state.store.find_by_id(parsed)
    if task is None:
        return f"No task with id #{parsed}."
    return render_task_detail(task)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add title=... subject=... date=YYYY-MM-DD priority=low|medium|high [description=...]",
    aliases=["new"],
)
registry.register("edit", cmd_edit, help_text="Start editing a task: /edit <id>.")
registry.register(
    "save", cmd_save, help_text="Save the task being edited (or add one): /save key=value ..."
)
registry.register("cancel", cmd_cancel, help_text="Cancel the edit in progress.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id> [-y].", aliases=["delete", "del"])
registry.register(
    "list", cmd_list, help_text="List tasks: /list [all|pending|completed|overdue|high].", aliases=["ls"]
)
registry.register("filter", cmd_filter, help_text="Set the default /list filter: /filter <mode>.")
registry.register("stats", cmd_stats, help_text="Show totals (total/pending/completed/overdue).")
registry.register("show", cmd_show, help_text="Show every field of a task: /show <id>.")
