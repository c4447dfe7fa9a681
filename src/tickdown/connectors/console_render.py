# src/tickdown/connectors/console_render.py

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from ..tasks.task_api import visual_state
from ..tasks.task_models import Task, TaskVisualState, parse_deadline

PENDING_COUNTDOWN = "Calculating..."

_STATE_TAGS = {
    TaskVisualState.ACTIVE: "",
    TaskVisualState.EXPIRED: " (overdue)",
    TaskVisualState.COMPLETED: " (done)",
}


def format_deadline(raw: str) -> str:
    try:
        return parse_deadline(raw).astimezone().strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return raw


def render_task_list(tasks: Iterable[Task], countdown: Mapping[str, str], now: datetime) -> str:
    """Numbered task list with the latest countdown value for each task."""
    items = list(tasks)
    if not items:
        return "No tasks yet. Use /add to create one.\nTotal: 0"

    lines: list[str] = []
    for pos, task in enumerate(items, start=1):
        box = "[x]" if task.completed else "[ ]"
        tag = _STATE_TAGS[visual_state(task, now)]
        remaining = countdown.get(task.id) or PENDING_COUNTDOWN
        lines.append(
            f"{pos:>2}. {box} {task.text}{tag}\n"
            f"      deadline: {format_deadline(task.deadline)}  |  {remaining}"
        )
    lines.append(f"Total: {len(items)}")
    return "\n".join(lines)
