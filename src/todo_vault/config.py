# src/todo_vault/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets or identity required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO_VAULT"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Identity used by the console connector ----
    default_owner: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    snapshot_path: Path

    # ---- Input limits enforced at the request boundary ----
    max_title_len: int
    max_description_len: int
    max_comment_len: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-vault") or "todo-vault"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        default_owner = _env(_k("OWNER"), "").strip()

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo_vault"))
        snapshot_path = _env_path(_k("SNAPSHOT_PATH"), data_dir / "tasks.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            default_owner=default_owner,
            data_dir=data_dir,
            snapshot_path=snapshot_path,
            max_title_len=_env_int(_k("MAX_TITLE_LEN"), 100),
            max_description_len=_env_int(_k("MAX_DESCRIPTION_LEN"), 500),
            max_comment_len=_env_int(_k("MAX_COMMENT_LEN"), 200),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
