# src/tickdown/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import datetime

from ..core.errors import NotFoundError, ValidationError
from ..core.ports import TaskDialog
from .task_models import DialogKind, Task, TaskDraft, TaskVisualState
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def _require_complete(draft: TaskDraft) -> None:
    if not draft.text.strip() or not draft.deadline.strip():
        raise ValidationError("Both the task name and the deadline are required.")


def add_task_via_dialog(store: TaskStore, dialog: TaskDialog) -> Task | None:
    """
    Ask the dialog for a new task and create it.
    Returns None if the user cancelled.
    """
    draft = dialog.prompt(DialogKind.ADD, None)
    if draft is None:
        logger.debug("Add dialog cancelled")
        return None
    _require_complete(draft)
    return store.create(draft.text, draft.deadline)


def edit_task_via_dialog(store: TaskStore, dialog: TaskDialog, task_id: str) -> bool:
    """
    Ask the dialog for new values (pre-filled with the current ones) and apply them.
    Returns True only if something actually changed.
    """
    current = store.get(task_id)
    draft = dialog.prompt(DialogKind.EDIT, TaskDraft(text=current.text, deadline=current.deadline))
    if draft is None:
        logger.debug("Edit dialog cancelled id=%s", task_id)
        return False
    _require_complete(draft)
    return store.edit(task_id, draft.text, draft.deadline)


def resolve_task_ref(store: TaskStore, ref: str) -> Task:
    """Accept a task id or a 1-based position in the list; an exact id match wins."""
    ref = (ref or "").strip()
    if not ref:
        raise NotFoundError(ref)

    tasks = store.tasks
    for task in tasks:
        if task.id == ref:
            return task
    if ref.isdigit():
        pos = int(ref)
        if 1 <= pos <= len(tasks):
            return tasks[pos - 1]

    raise NotFoundError(ref)


def visual_state(task: Task, now: datetime) -> TaskVisualState:
    if task.completed:
        return TaskVisualState.COMPLETED
    try:
        expired = task.deadline_at() <= now
    except ValueError:
        expired = False
    return TaskVisualState.EXPIRED if expired else TaskVisualState.ACTIVE
