# src/tickdown/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TICKDOWN"

REMOTE_BACKENDS = ("firestore", "memory")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_float(name: str, default: float, *, minimum: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    raw = _env(name, default).strip().lower()
    return raw if raw in choices else default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Remote store ----
    remote_backend: str
    firestore_base_url: str
    firestore_project_id: str
    firestore_database: str
    firestore_collection: str
    firestore_api_key: str | None
    remote_timeout_seconds: float

    # ---- Countdown ----
    countdown_interval_seconds: float
    expiry_marker: str

    @property
    def firestore_configured(self) -> bool:
        return bool(self.firestore_project_id and self.firestore_collection)

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tickdown").strip() or "tickdown"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tickdown"))

        remote_backend = _env_choice(_k("REMOTE_BACKEND"), "firestore", REMOTE_BACKENDS)
        firestore_base_url = _env(_k("FIRESTORE_BASE_URL"), "https://firestore.googleapis.com/v1").strip()
        firestore_project_id = _env(_k("FIRESTORE_PROJECT_ID"), "").strip()
        firestore_database = _env(_k("FIRESTORE_DATABASE"), "(default)").strip() or "(default)"
        firestore_collection = _env(_k("FIRESTORE_COLLECTION"), "tasks").strip() or "tasks"
        firestore_api_key = _env(_k("FIRESTORE_API_KEY"), "").strip() or None
        remote_timeout_seconds = _env_float(_k("REMOTE_TIMEOUT_SECONDS"), 10.0, minimum=0.1)

        countdown_interval_seconds = _env_float(_k("COUNTDOWN_INTERVAL_SECONDS"), 1.0, minimum=0.05)
        expiry_marker = _env(_k("EXPIRY_MARKER"), "Time's up!") or "Time's up!"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            remote_backend=remote_backend,
            firestore_base_url=firestore_base_url,
            firestore_project_id=firestore_project_id,
            firestore_database=firestore_database,
            firestore_collection=firestore_collection,
            firestore_api_key=firestore_api_key,
            remote_timeout_seconds=remote_timeout_seconds,
            countdown_interval_seconds=countdown_interval_seconds,
            expiry_marker=expiry_marker,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
