# src/tickdown/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- picks the remote store implementation (Firestore or in-memory),
- wires TaskStore, CountdownEngine and the dialog into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_connector import ConsoleDialog
from ..core.ports import RemoteTaskStore, TaskDialog
from ..core.state import AppState
from ..remote.firestore import FirestoreRemoteStore
from ..remote.memory import InMemoryRemoteStore
from ..tasks.countdown import CountdownEngine
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_remote_store(settings) -> RemoteTaskStore:
    """
    Build the remote store selected in settings.

    Falls back to the in-memory store (offline demo mode) when Firestore is
    selected but not configured.
    """
    backend = str(getattr(settings, "remote_backend", "memory"))
    if backend == "firestore":
        if not settings.firestore_configured:
            logger.warning(
                "Firestore backend selected but TICKDOWN_FIRESTORE_PROJECT_ID is not set; "
                "using an in-memory store (tasks will not persist)."
            )
            return InMemoryRemoteStore()
        return FirestoreRemoteStore(
            project_id=settings.firestore_project_id,
            collection=settings.firestore_collection,
            database=settings.firestore_database,
            api_key=settings.firestore_api_key,
            base_url=settings.firestore_base_url,
            timeout=settings.remote_timeout_seconds,
        )

    logger.info("Using in-memory remote store (tasks will not persist).")
    return InMemoryRemoteStore()


def create_initial_state(
    *,
    settings=None,
    remote: RemoteTaskStore | None = None,
    dialog: TaskDialog | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings/remote/dialog injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    if remote is None:
        remote = create_remote_store(settings)

    store = TaskStore(remote)
    countdown = CountdownEngine(
        lambda: store.tasks,
        interval_seconds=settings.countdown_interval_seconds,
        expiry_marker=settings.expiry_marker,
    )

    return AppState(
        settings=settings,
        remote=remote,
        store=store,
        countdown=countdown,
        dialog=dialog or ConsoleDialog(),
    )


def close_remote(state: AppState) -> None:
    """Best-effort release of the remote client (no exceptions should escape)."""
    close = getattr(state.remote, "close", None)
    if not callable(close):
        return
    try:
        close()
    except Exception:
        logger.debug("Remote store close failed.", exc_info=True)
