# src/unitrack/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def _ask_yes_no(read: InputFn, question: str) -> bool:
    try:
        answer = read(f"{question} [y/N] ").strip().lower()
    except (EOFError, KeyboardInterrupt):
        return False
    return answer in ("y", "yes")


def run_console_loop(
    state: AppState,
    *,
    read: InputFn = input,
    write: OutputFn = print,
) -> None:
    """
    Interactive REPL: every line is a slash command forwarded to the command registry.

    `read` / `write` are injectable so the loop can be driven from tests.
    """
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "unitrack"))
    logger.info("Console connector started (tasks=%d).", len(state.store))
    write(f"[{app_name}] Type /help for commands, /exit to quit.")
    write(command_registry.handle(state, "/stats") or "")

    def confirm(question: str) -> bool:
        return _ask_yes_no(read, question)

    while True:
        prompt = "edit> " if state.controller.is_editing else "> "
        try:
            line = read(prompt).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not line.startswith("/"):
            write("Commands start with '/'. Use /help to list available commands.")
            continue

        try:
            response = command_registry.handle(state, line, confirm=confirm)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response:
            write(response)

    logger.info("Console connector finished.")
