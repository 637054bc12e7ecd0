# src/taskdesk/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from datetime import datetime
from typing import Any, TextIO

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..ui.render import render_task_list

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class _ListRedrawer:
    """
    Re-print the task list when a remote response changes what is shown.

    Draft and filter edits are echoed by their commands, so only the
    collection, load state and error are watched here.
    """

    def __init__(self, state: AppState) -> None:
        self._state = state
        self._last: tuple[Any, ...] | None = None

    def _snapshot(self) -> tuple[Any, ...]:
        c = self._state.controller
        return (tuple(c.tasks), c.load_state, c.error)

    def __call__(self) -> None:
        snap = self._snapshot()
        if snap == self._last:
            return
        self._last = snap
        print()
        _print_ts(render_task_list(self._state.controller))


class StdinLineReader:
    """
    Feed stdin lines into the event loop from a daemon thread.

    The thread is not part of the loop's default executor, so shutting the
    loop down (e.g. after Ctrl+C) never waits on a blocked read. An empty
    string in the queue marks EOF.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, stream: TextIO | None = None) -> None:
        self._loop = loop
        self._stream = stream if stream is not None else sys.stdin
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._thread = threading.Thread(target=self._pump, name="stdin-reader", daemon=True)
        self._thread.start()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def _pump(self) -> None:
        while True:
            line = self._stream.readline()
            try:
                self._loop.call_soon_threadsafe(self._queue.put_nowait, line)
            except RuntimeError:
                # Loop already closed; nobody is listening any more.
                return
            if not line:
                return

    async def readline(self, prompt: str = "") -> str:
        if prompt:
            print(prompt, end="", flush=True)
        line = await self._queue.get()
        if not line:
            raise EOFError
        return line.rstrip("\r\n")


_stdin_reader: StdinLineReader | None = None


async def _read_line(prompt: str) -> str:
    global _stdin_reader
    loop = asyncio.get_running_loop()
    if _stdin_reader is None or _stdin_reader.loop is not loop:
        _stdin_reader = StdinLineReader(loop)
    return await _stdin_reader.readline(prompt)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (api=%s).", getattr(state.settings, "api_base_url", "?"))
    app_name = str(getattr(state.settings, "app_name", "taskdesk"))

    def emit(text: str) -> None:
        _print_ts(text)

    unsubscribe = state.controller.subscribe(_ListRedrawer(state))
    try:
        _print_ts(f"[CONSOLE] {app_name}. Use /help for commands. Use /exit to quit.\n")
        state.spawn(state.controller.start())

        while True:
            try:
                user_input = (await _read_line(">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except asyncio.CancelledError:
                # Ctrl+C under asyncio.run() cancels the main task instead of raising KeyboardInterrupt.
                logger.info("Console interrupted, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in EXIT_COMMANDS:
                logger.info("Console exit command received.")
                break

            if not user_input.startswith("/"):
                # Bare text is shorthand for setting the draft title.
                user_input = f"/title {user_input}"

            try:
                cmd_response = command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."

            if cmd_response is not None:
                _print_ts(cmd_response)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
