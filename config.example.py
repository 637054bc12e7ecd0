# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKDESK_APP_NAME": "App display name shown in the board header (default: taskdesk).",
    "TASKDESK_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Remote store
    "TASKDESK_API_BASE_URL": "Task store base URL (default: http://localhost:8080/api).",
    "TASKDESK_REQUEST_TIMEOUT_SECONDS": "Optional per-request timeout; unset or <= 0 means no timeout.",
    # Paths (gitignored)
    "TASKDESK_DATA_DIR": "Local data directory holding taskdesk.log (default: .local/taskdesk).",
}
