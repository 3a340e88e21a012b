# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.errors import TaskflowError, friendly_error_message
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def handle_line(state: AppState, line: str) -> str:
    """
    Run one console line and return the reply text.

    Slash commands go through the registry; anything else is added as a task.
    """
    if not line.startswith("/"):
        line = f"/add {line}"

    try:
        reply = await command_registry.handle(state, line)
    except TaskflowError as e:
        logger.info("Command rejected: %s", e)
        return friendly_error_message(e)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    return reply or ""


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (storage=%s).", state.repository.mode.value)
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
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

        _print_ts(await handle_line(state, user_input))

    logger.info("Console connector finished.")
