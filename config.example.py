# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TODO_VAULT_APP_NAME": "App display name (default: todo-vault).",
    "TODO_VAULT_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TODO_VAULT_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Identity
    "TODO_VAULT_OWNER": "Identity the console acts as on start (default: empty, use /login).",
    # Paths
    "TODO_VAULT_DATA_DIR": "Local data dir (default: .local/todo_vault).",
    "TODO_VAULT_SNAPSHOT_PATH": "Task snapshot JSON file (default: <data_dir>/tasks.json).",
    # Limits
    "TODO_VAULT_MAX_TITLE_LEN": "Max task title length (default: 100).",
    "TODO_VAULT_MAX_DESCRIPTION_LEN": "Max task description length (default: 500).",
    "TODO_VAULT_MAX_COMMENT_LEN": "Max comment length (default: 200).",
}
