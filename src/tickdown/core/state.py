# src/tickdown/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.countdown import CountdownEngine
from ..tasks.task_store import TaskStore
from .ports import RemoteTaskStore, TaskDialog


@dataclass
class AppState:
    # Settings object (config.Settings or a test namespace).
    settings: object

    remote: RemoteTaskStore
    store: TaskStore
    countdown: CountdownEngine
    dialog: TaskDialog
