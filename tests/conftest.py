# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_vault.core.state import AppState
from todo_vault.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="todo-vault-test",
        log_level="DEBUG",
        console_enabled=False,
        default_owner="alice",
        data_dir=data_dir,
        snapshot_path=data_dir / "tasks.json",
        max_title_len=100,
        max_description_len=500,
        max_comment_len=200,
    )


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """AppState wired with a fresh in-memory store, signed in as 'alice'."""
    return AppState(settings=settings, task_store=store, owner=settings.default_owner)
