# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tickdown.cli.bootstrap import create_initial_state
from tickdown.core.state import AppState
from tickdown.tasks.task_store import TaskStore

from .fakes import FakeDialog, FakeRemoteStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="tickdown-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        remote_backend="memory",
        firestore_base_url="https://firestore.example.test/v1",
        firestore_project_id="",
        firestore_configured=False,
        firestore_database="(default)",
        firestore_collection="tasks",
        firestore_api_key=None,
        remote_timeout_seconds=1.0,
        countdown_interval_seconds=0.01,
        expiry_marker="Time's up!",
    )


@pytest.fixture()
def remote() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture()
def store(remote: FakeRemoteStore) -> TaskStore:
    return TaskStore(remote)


@pytest.fixture()
def dialog() -> FakeDialog:
    return FakeDialog()


@pytest.fixture()
def state(settings: SimpleNamespace, remote: FakeRemoteStore, dialog: FakeDialog):
    """AppState wired with deterministic fakes; the countdown is always stopped afterwards."""
    app_state: AppState = create_initial_state(settings=settings, remote=remote, dialog=dialog)
    try:
        yield app_state
    finally:
        app_state.countdown.stop()
