# src/tickdown/core/errors.py

"""
Error taxonomy shared by the store, the remote adapters and the CLI.

- ValidationError: bad/missing input, raised before any remote call.
- NotFoundError: the operation targets a task id that is not in the local list.
- SyncError: a remote operation failed (wraps the adapter exception as __cause__).
- RemoteStoreError: raised by remote adapters themselves.
"""

from __future__ import annotations


class TickdownError(Exception):
    """Base class for all tickdown errors."""


class ValidationError(TickdownError):
    pass


class NotFoundError(TickdownError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class SyncError(TickdownError):
    def __init__(self, operation: str, task_id: str | None = None, detail: str = "") -> None:
        where = f" task_id={task_id}" if task_id else ""
        msg = f"Remote {operation} failed{where}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
        self.operation = operation
        self.task_id = task_id


class RemoteStoreError(TickdownError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
