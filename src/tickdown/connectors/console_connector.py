# src/tickdown/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import DialogKind, TaskDraft
from ..tasks.task_store import StoreEvent, StoreEventKind
from .console_render import format_deadline, render_task_list

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class ConsoleDialog:
    """
    TaskDialog over input().

    - Add: an empty name (or Ctrl+D / Ctrl+C) cancels.
    - Edit: an empty answer keeps the current value.
    """

    def __init__(self, input_fn: InputFn = input) -> None:
        self._input = input_fn

    def _ask(self, label: str) -> str | None:
        try:
            return self._input(label).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return None

    def prompt(self, kind: DialogKind, initial: TaskDraft | None = None) -> TaskDraft | None:
        if kind == DialogKind.EDIT and initial is not None:
            print("Edit task (leave empty to keep the current value)")
            text = self._ask(f"  Task name [{initial.text}]: ")
            if text is None:
                return None
            deadline = self._ask(f"  Deadline [{format_deadline(initial.deadline)}]: ")
            if deadline is None:
                return None
            return TaskDraft(text=text or initial.text, deadline=deadline or initial.deadline)

        print("New task (empty name cancels)")
        text = self._ask("  Task name: ")
        if not text:
            return None
        deadline = self._ask("  Deadline (YYYY-MM-DD HH:MM): ")
        if deadline is None:
            return None
        return TaskDraft(text=text, deadline=deadline)


def _on_store_event(event: StoreEvent) -> None:
    if event.kind == StoreEventKind.SYNC_FAILED and event.error is not None:
        _print_ts(f"[SYNC][WARN] {event.error}. Local change kept; use /reload to resync.")


def run_console_loop(state: AppState, input_fn: InputFn = input) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")
    print(render_task_list(state.store.tasks, state.countdown.snapshot(), datetime.now().astimezone()))

    unsubscribe = state.store.subscribe(_on_store_event)

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        while True:
            try:
                line = input_fn(">>> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not line:
                continue

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not line.startswith("/"):
                _print_ts("Commands start with '/'. Use /help to list them.")
                continue

            try:
                response = command_registry.handle(state, line, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is not None:
                print(f"[{_ts_local()}] {response}")
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
