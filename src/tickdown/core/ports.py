# src/tickdown/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the remote document store and the dialog swappable and makes testing easier.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from ..tasks.task_models import DialogKind, TaskDraft

TaskRecord = dict[str, Any]
# Remote document: {"id": "...", "text": "...", "completed": bool, "deadline": "..."}.


class RemoteTaskStore(Protocol):
    """
    Remote document collection keyed by opaque ids.

    Implementations raise on failure (RemoteStoreError or any transport error);
    TaskStore decides whether the failure is fatal for the caller.
    """

    def create(self, fields: dict[str, Any]) -> str: ...
    def list(self) -> Sequence[TaskRecord]: ...
    def update(self, task_id: str, fields: dict[str, Any]) -> None: ...
    def delete(self, task_id: str) -> None: ...


class TaskDialog(Protocol):
    """
    Modal collaborator that collects a label and a deadline.

    Returns None when the user cancels.
    """

    def prompt(self, kind: DialogKind, initial: TaskDraft | None = None) -> TaskDraft | None: ...
