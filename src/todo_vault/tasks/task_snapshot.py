# src/todo_vault/tasks/task_snapshot.py

"""
Durable form of the task store.

A snapshot is the flat state of a TaskStore: the id counter plus every
(key, record) pair in mapping order. It is written as JSON just before the
process goes away and read back right after it starts:

    {"version": 1, "next_id": 7, "entries": [{"key": "...", "record": {...}}, ...]}

A missing file means "first start". Anything unreadable is fatal: starting
with an unknown next_id could hand out an id that already exists.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .task_models import TaskRecord

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SnapshotCorruptError(RuntimeError):
    """The durable task state cannot be trusted; the app must not start."""


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    next_id: int
    entries: tuple[tuple[str, TaskRecord], ...] = ()


def snapshot_to_dict(snapshot: StoreSnapshot) -> dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "next_id": snapshot.next_id,
        "entries": [{"key": key, "record": rec.to_dict()} for key, rec in snapshot.entries],
    }


def snapshot_from_dict(data: Any) -> StoreSnapshot:
    if not isinstance(data, dict):
        raise SnapshotCorruptError("snapshot root must be a JSON object")

    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise SnapshotCorruptError(f"unsupported snapshot version: {version!r}")

    if "next_id" not in data:
        raise SnapshotCorruptError("snapshot has no next_id")
    next_id = data["next_id"]
    if isinstance(next_id, bool) or not isinstance(next_id, int) or next_id < 1:
        raise SnapshotCorruptError(f"invalid next_id in snapshot: {next_id!r}")

    raw_entries = data.get("entries")
    if not isinstance(raw_entries, list):
        raise SnapshotCorruptError("snapshot entries must be a list")

    entries: list[tuple[str, TaskRecord]] = []
    for i, item in enumerate(raw_entries):
        if not isinstance(item, dict) or not isinstance(item.get("key"), str):
            raise SnapshotCorruptError(f"entry #{i} has no string key")
        record_data = item.get("record")
        if not isinstance(record_data, dict):
            raise SnapshotCorruptError(f"entry #{i} has no record")
        try:
            record = TaskRecord.from_dict(record_data)
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotCorruptError(f"entry #{i} has a malformed record: {e}") from e
        entries.append((item["key"], record))

    return StoreSnapshot(next_id=next_id, entries=tuple(entries))


def save_snapshot(path: str | Path, snapshot: StoreSnapshot) -> None:
    """Write the snapshot atomically (tmp file + os.replace)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(snapshot_to_dict(snapshot), ensure_ascii=False, indent=2), "utf-8")
    os.replace(tmp, path)
    with contextlib.suppress(Exception):
        # Best-effort: task text is personal, keep the file private on disk.
        os.chmod(path, 0o600)

    logger.info(
        "Saved task snapshot: %d records next_id=%s to %s",
        len(snapshot.entries),
        snapshot.next_id,
        path,
    )


def load_snapshot(path: str | Path) -> StoreSnapshot | None:
    """
    Read a snapshot written by save_snapshot().

    Returns None if there is no file yet. Raises SnapshotCorruptError for
    anything else that goes wrong.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No task snapshot at %s, starting empty.", path)
        return None

    try:
        data = json.loads(path.read_text("utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotCorruptError(f"cannot read task snapshot {path}: {e}") from e

    snapshot = snapshot_from_dict(data)
    logger.info(
        "Loaded task snapshot: %d records next_id=%s from %s",
        len(snapshot.entries),
        snapshot.next_id,
        path,
    )
    return snapshot
