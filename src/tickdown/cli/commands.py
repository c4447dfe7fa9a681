# src/tickdown/cli/commands.py

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..connectors.console_render import render_task_list
from ..core.errors import NotFoundError, SyncError, TickdownError, ValidationError
from ..core.state import AppState
from ..tasks.task_api import add_task_via_dialog, edit_task_via_dialog, resolve_task_ref

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

MAX_WATCH_SECONDS = 600


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

        Expected errors (validation, unknown task, remote failure) become replies;
        anything else propagates to the caller.
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
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TickdownError as e:
            return describe_error(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - quit")
        return "\n".join(lines)


registry = CommandRegistry()


def describe_error(err: TickdownError) -> str:
    if isinstance(err, ValidationError):
        return f"Invalid input: {err}"
    if isinstance(err, NotFoundError):
        return f"No such task: {err.task_id or '(empty)'}"
    if isinstance(err, SyncError):
        return f"Sync error: {err}"
    return str(err)


def _now() -> datetime:
    return datetime.now().astimezone()


def _need_ref(args: list[str], usage: str) -> str:
    if not args:
        raise ValidationError(f"Usage: {usage}")
    return " ".join(args)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_task_list(state.store.tasks, state.countdown.snapshot(), _now())


def cmd_add(state: AppState, args: list[str]) -> str:
    task = add_task_via_dialog(state.store, state.dialog)
    if task is None:
        return "Cancelled."
    return f"Task added: {task.text}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    task = resolve_task_ref(state.store, _need_ref(args, "/edit <n|id>"))
    if edit_task_via_dialog(state.store, state.dialog, task.id):
        return f"Task updated: {state.store.get(task.id).text}"
    return "No changes."


def cmd_toggle(state: AppState, args: list[str]) -> str:
    task = resolve_task_ref(state.store, _need_ref(args, "/toggle <n|id>"))
    state.store.toggle_completion(task.id)
    done = state.store.get(task.id).completed
    return f"Task {'completed' if done else 'reopened'}: {task.text}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    task = resolve_task_ref(state.store, _need_ref(args, "/delete <n|id>"))
    warning = state.store.delete(task.id)
    if warning is not None:
        return f"Task deleted locally: {task.text} (warning: {warning})"
    return f"Task deleted: {task.text}"


def cmd_reload(state: AppState, args: list[str]) -> str:
    state.store.load()
    return f"Reloaded {len(state.store)} task(s) from the remote store."


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.store
    sync = "OUT OF SYNC (use /reload)" if store.needs_resync else "ok"
    return (
        "Status:\n"
        f"  tasks: {len(store)}\n"
        f"  remote: {type(state.remote).__name__}\n"
        f"  sync: {sync}\n"
        f"  countdown: {state.countdown.state.value} "
        f"(every {state.countdown.interval_seconds:g}s)"
    )


def cmd_watch(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """Print countdown updates as they are published, for N seconds."""
    try:
        seconds = float(args[0]) if args else 5.0
    except ValueError:
        raise ValidationError("Usage: /watch [seconds]") from None
    seconds = max(0.0, min(seconds, float(MAX_WATCH_SECONDS)))

    if emit is None:
        return cmd_list(state, [])
    if not state.countdown.running:
        return "Countdown is not running."

    def on_update(countdown: dict[str, str]) -> None:
        emit(render_task_list(state.store.tasks, countdown, _now()))

    unsubscribe = state.countdown.subscribe(on_update)
    try:
        threading.Event().wait(seconds)
    except KeyboardInterrupt:
        pass
    finally:
        unsubscribe()
    return "Watch finished."


registry.register("help", cmd_help, "show this help", aliases=["h", "?"])
registry.register("list", cmd_list, "show tasks with their countdown", aliases=["ls"])
registry.register("add", cmd_add, "add a task (asks for a name and a deadline)", aliases=["new"])
registry.register("edit", cmd_edit, "edit a task: /edit <n|id>")
registry.register("toggle", cmd_toggle, "mark a task done/undone: /toggle <n|id>", aliases=["done"])
registry.register("delete", cmd_delete, "delete a task: /delete <n|id>", aliases=["rm", "del"])
registry.register("reload", cmd_reload, "reload all tasks from the remote store (resync)")
registry.register("status", cmd_status, "show store and countdown status")
registry.register("watch", cmd_watch, "follow the live countdown: /watch [seconds]")
