# src/tickdown/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from ..core.errors import NotFoundError, SyncError, ValidationError
from ..core.ports import RemoteTaskStore
from .task_models import Task, is_valid_deadline

logger = logging.getLogger(__name__)


class StoreEventKind(StrEnum):
    LOADED = "loaded"
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    SYNC_FAILED = "sync_failed"


@dataclass(slots=True, frozen=True)
class StoreEvent:
    kind: StoreEventKind
    task_id: str | None = None
    task: Task | None = None
    error: SyncError | None = None


StoreListener = Callable[[StoreEvent], None]


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


class TaskStore:
    """
    In-memory task list kept in sync with a remote document collection.

    Mutation policy:
    - create: remote first (the remote store assigns the id), then append locally.
    - toggle/edit/delete: local first, then the remote call. A remote failure is
      reported (log + SYNC_FAILED event + needs_resync) but never rolled back.
    - load: full replace; the only way to recover from drift.

    Thread-safety:
    - mutations are expected from a single intent-handling thread
    - readers (countdown) get an immutable tuple snapshot via .tasks
    """

    def __init__(self, remote: RemoteTaskStore) -> None:
        self._remote = remote
        self._tasks: list[Task] = []
        self._listeners: list[StoreListener] = []
        self._last_sync_error: SyncError | None = None

    # ---- read API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task:
        return self._tasks[self._index_of(task_id)]

    @property
    def needs_resync(self) -> bool:
        """True if a remote list/update/delete failed since the last successful load()."""
        return self._last_sync_error is not None

    @property
    def last_sync_error(self) -> SyncError | None:
        return self._last_sync_error

    # ---- observers ----

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a listener and return a canceller."""
        self._listeners.append(listener)

        def cancel() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return cancel

    def _emit(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Store listener failed event=%s", event.kind.value)

    # ---- low-level helpers ----

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise NotFoundError(task_id)

    def _report_failure(self, operation: str, task_id: str, exc: Exception) -> SyncError:
        err = SyncError(operation, task_id, str(exc))
        err.__cause__ = exc
        self._last_sync_error = err
        logger.warning("%s (local change kept, reload to resync)", err)
        self._emit(StoreEvent(StoreEventKind.SYNC_FAILED, task_id=task_id, error=err))
        return err

    def _remote_update(self, task_id: str, fields: dict[str, Any]) -> None:
        try:
            self._remote.update(task_id, fields)
        except Exception as e:
            self._report_failure("update", task_id, e)
            return
        logger.debug("Remote update ok id=%s fields=%s", task_id, sorted(fields))

    # ---- public API ----

    def load(self) -> None:
        """
        Replace the local list with the full remote collection.

        On failure the local list stays empty, the store is marked out of sync
        and listeners get a LOADED event carrying the error before SyncError is raised.
        """
        self._tasks = []
        try:
            records = list(self._remote.list())
        except Exception as e:
            err = SyncError("list", detail=str(e))
            self._last_sync_error = err
            logger.warning("Remote list failed: %s", e)
            self._emit(StoreEvent(StoreEventKind.LOADED, error=err))
            raise err from e

        loaded: list[Task] = []
        for record in records:
            task = Task.from_record(record)
            if not task.id:
                logger.warning("Skipping remote record without id: %r", record)
                continue
            loaded.append(task)

        self._tasks = loaded
        self._last_sync_error = None
        logger.info("TaskStore loaded total=%s", len(loaded))
        self._emit(StoreEvent(StoreEventKind.LOADED))

    def create(self, text: str, deadline: str) -> Task:
        if _blank(text):
            raise ValidationError("Task text is required")
        if _blank(deadline):
            raise ValidationError("Task deadline is required")
        if not is_valid_deadline(deadline):
            raise ValidationError(f"Invalid deadline: {deadline!r}")

        draft = Task(id="", text=text, deadline=deadline)
        try:
            task_id = self._remote.create(draft.to_fields())
        except Exception as e:
            logger.warning("Remote create failed: %s", e)
            raise SyncError("create", detail=str(e)) from e
        if not task_id:
            raise SyncError("create", detail="remote store returned an empty id")

        task = replace(draft, id=str(task_id))
        self._tasks.append(task)
        logger.info("Task created id=%s deadline=%s", task.id, task.deadline)
        self._emit(StoreEvent(StoreEventKind.CREATED, task_id=task.id, task=task))
        return task

    def toggle_completion(self, task_id: str) -> None:
        idx = self._index_of(task_id)
        task = replace(self._tasks[idx], completed=not self._tasks[idx].completed)
        self._tasks[idx] = task
        self._emit(StoreEvent(StoreEventKind.UPDATED, task_id=task_id, task=task))

        self._remote_update(task_id, {"completed": task.completed})

    def edit(self, task_id: str, new_text: str | None, new_deadline: str | None) -> bool:
        """
        Apply a new label and/or deadline.

        An empty value keeps the current field; both empty is a ValidationError.
        Returns False (and does nothing remotely) when nothing changes.
        """
        idx = self._index_of(task_id)
        if _blank(new_text) and _blank(new_deadline):
            raise ValidationError("Task text and deadline cannot both be empty")

        current = self._tasks[idx]
        text = current.text if _blank(new_text) else str(new_text)
        deadline = current.deadline if _blank(new_deadline) else str(new_deadline)

        if deadline != current.deadline and not is_valid_deadline(deadline):
            raise ValidationError(f"Invalid deadline: {deadline!r}")

        if text == current.text and deadline == current.deadline:
            logger.debug("Edit is a no-op id=%s", task_id)
            return False

        task = replace(current, text=text, deadline=deadline)
        self._tasks[idx] = task
        self._emit(StoreEvent(StoreEventKind.UPDATED, task_id=task_id, task=task))

        self._remote_update(task_id, {"text": text, "deadline": deadline})
        return True

    def delete(self, task_id: str) -> SyncError | None:
        """
        Remove a task locally, then remotely.

        Returns the SyncError as a non-fatal warning if the remote delete failed.
        """
        idx = self._index_of(task_id)
        task = self._tasks.pop(idx)
        logger.info("Task deleted id=%s", task_id)
        self._emit(StoreEvent(StoreEventKind.DELETED, task_id=task_id, task=task))

        try:
            self._remote.delete(task_id)
        except Exception as e:
            return self._report_failure("delete", task_id, e)
        return None
