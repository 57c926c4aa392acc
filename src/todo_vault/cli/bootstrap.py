# src/todo_vault/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- rebuilds the task store from its snapshot (or starts empty on first run),
- writes the snapshot back on shutdown.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_snapshot import load_snapshot, save_snapshot
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.snapshot_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().

    A corrupt snapshot raises SnapshotCorruptError out of here on purpose:
    serving with an unknown id counter is worse than not starting.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    snapshot = load_snapshot(settings.snapshot_path)
    store = TaskStore.from_snapshot(snapshot) if snapshot is not None else TaskStore()
    logger.info("TaskStore ready total=%s next_id=%s", store.count_all(), store.next_id)

    return AppState(
        settings=settings,
        task_store=store,
        owner=str(getattr(settings, "default_owner", "") or ""),
    )


def save_store_snapshot(state: AppState) -> None:
    path = Path(state.settings.snapshot_path)  # type: ignore[attr-defined]
    try:
        save_snapshot(path, state.task_store.snapshot())
    except Exception:
        logger.exception("Failed to save task snapshot to %s", path)
        raise
