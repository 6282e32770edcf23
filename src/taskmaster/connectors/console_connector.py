# src/taskmaster/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.deadline_monitor import Reminder

logger = logging.getLogger(__name__)

LineReader = Callable[[str], Awaitable[str]]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Prints deadline reminders into the console."""

    def notify(self, reminder: Reminder) -> None:
        _print_ts(reminder.text)


async def _read_stdin(prompt: str) -> str:
    # input() blocks, so it runs in a worker thread; commands still execute on the loop.
    return await asyncio.to_thread(input, prompt)


async def run_console_loop(state: AppState, *, read_line: LineReader | None = None) -> None:
    """
    Interactive REPL. Every command runs on the event loop thread, the same one the
    deadline monitor fires on, so the two never interleave inside a mutation.
    """
    reader = read_line or _read_stdin
    app_name = str(getattr(state.settings, "app_name", "taskmaster"))

    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = (await reader("> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is shorthand for /add.
            user_input = f"/add {user_input}"

        try:
            response = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(response, flush=True)

    logger.info("Console connector finished.")
