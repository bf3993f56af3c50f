# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting without opening the source.
"""

ENV_VARS = {
    # App / logging
    "SALESBOARD_APP_NAME": "App display name (default: salesboard).",
    "SALESBOARD_LOG_LEVEL": "Console logging level (default: INFO).",
    "SALESBOARD_DATA_DIR": "Local data directory for logs and default tasks.json (default: .local/salesboard).",
    # Bootstrap
    "SALESBOARD_TASKS_SOURCE": (
        "URL (http/https) or file path of the initial tasks JSON list "
        "(default: <data_dir>/tasks.json; empty => synthetic data only)."
    ),
    "SALESBOARD_SEED_COUNT": "Number of synthetic tasks generated when the source is empty (default: 50).",
    "SALESBOARD_SEED": "Optional integer seed for reproducible synthetic tasks.",
    "SALESBOARD_LOAD_TIMEOUT_SECONDS": "HTTP timeout for the initial load (default: 10).",
    # Metrics
    "SALESBOARD_REFERENCE_REVENUE_PER_HOUR": "Reference rate for time efficiency % (default: 100).",
    # Console
    "SALESBOARD_CONSOLE_ENABLED": "Start the interactive console (true/false, default: true).",
}
