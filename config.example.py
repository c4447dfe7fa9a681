# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real API keys. Use a local .env (gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TICKDOWN_APP_NAME": "App display name (default: tickdown).",
    "TICKDOWN_LOG_LEVEL": "Console logging level (default: INFO).",
    "TICKDOWN_DATA_DIR": "Local data directory for logs (default: .local/tickdown).",
    # Remote store
    "TICKDOWN_REMOTE_BACKEND": "firestore or memory (default: firestore).",
    "TICKDOWN_FIRESTORE_BASE_URL": "Firestore REST root (default: https://firestore.googleapis.com/v1).",
    "TICKDOWN_FIRESTORE_PROJECT_ID": "Firestore project id (required for the firestore backend).",
    "TICKDOWN_FIRESTORE_DATABASE": "Firestore database id (default: (default)).",
    "TICKDOWN_FIRESTORE_COLLECTION": "Collection holding the tasks (default: tasks).",
    "TICKDOWN_FIRESTORE_API_KEY": "Optional web API key sent as ?key=...",
    "TICKDOWN_REMOTE_TIMEOUT_SECONDS": "HTTP timeout for remote calls (default: 10).",
    # Countdown
    "TICKDOWN_COUNTDOWN_INTERVAL_SECONDS": "Countdown tick period (default: 1.0).",
    "TICKDOWN_EXPIRY_MARKER": "Text shown once a deadline has passed (default: Time's up!).",
}
