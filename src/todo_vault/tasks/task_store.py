# src/todo_vault/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
import threading
import time

from .task_keys import KeyDecodeError, decode_key, encode_key
from .task_models import TaskRecord, TaskStats
from .task_snapshot import SnapshotCorruptError, StoreSnapshot

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory per-owner task store.

    Layout:
    - records: encoded key -> TaskRecord (the primary mapping)
    - owner index: owner -> ids, kept in step with records so owner-scoped
      reads never scan other owners' keys
    - next_id: one counter for all owners, never rewound

    Every method takes the verified caller identity as `owner`. Anything not
    found under (owner, id) is reported as False / None / [] / 0.

    Thread-safety:
    - one re-entrant lock around every public method
    """

    def __init__(self, *, next_id: int = 1) -> None:
        if next_id < 1:
            raise ValueError("next_id must be >= 1")
        self._lock = threading.RLock()
        self._records: dict[str, TaskRecord] = {}
        self._by_owner: dict[str, set[int]] = {}
        self._next_id = int(next_id)
        self._last_created_ns = 0

    # ---- low-level helpers ----

    @staticmethod
    def _require_text(name: str, value: object) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{name} is required")
        return value

    @staticmethod
    def _key(owner: str, task_id: object) -> str | None:
        # Only real positive ints address a record; 1.9 or True must not reach task 1.
        if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id < 1:
            return None
        return encode_key(owner, task_id)

    def _insert(self, key: str, record: TaskRecord) -> None:
        self._records[key] = record
        self._by_owner.setdefault(record.owner, set()).add(record.id)
        self._last_created_ns = max(self._last_created_ns, record.created_at)

    def _remove(self, owner: str, task_id: int) -> bool:
        key = self._key(owner, task_id)
        if key is None:
            return False
        record = self._records.pop(key, None)
        if record is None:
            return False
        ids = self._by_owner.get(owner)
        if ids is not None:
            ids.discard(task_id)
            if not ids:
                del self._by_owner[owner]
        return True

    def _owned(self, owner: str) -> list[TaskRecord]:
        ids = sorted(self._by_owner.get(owner, ()))
        return [self._records[encode_key(owner, i)] for i in ids]

    def _next_created_ns(self) -> int:
        # Strictly increasing even if the wall clock stalls or steps back.
        now = max(time.time_ns(), self._last_created_ns + 1)
        self._last_created_ns = now
        return now

    # ---- snapshot / restore ----

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def count_all(self) -> int:
        with self._lock:
            return len(self._records)

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(next_id=self._next_id, entries=tuple(self._records.items()))

    @classmethod
    def from_snapshot(cls, snapshot: StoreSnapshot) -> TaskStore:
        """
        Rebuild a store from a snapshot.

        Refuses (SnapshotCorruptError) anything that could make the store
        hand out an id twice or file a record under someone else's key.
        """
        next_id = snapshot.next_id
        if isinstance(next_id, bool) or not isinstance(next_id, int) or next_id < 1:
            raise SnapshotCorruptError(f"invalid next_id in snapshot: {next_id!r}")

        store = cls(next_id=next_id)
        for key, record in snapshot.entries:
            try:
                owner, task_id = decode_key(key)
            except KeyDecodeError as e:
                raise SnapshotCorruptError(str(e)) from e
            if (owner, task_id) != (record.owner, record.id):
                raise SnapshotCorruptError(
                    f"key {key!r} does not match record owner={record.owner!r} id={record.id}"
                )
            try:
                for name in ("owner", "title", "description"):
                    cls._require_text(name, getattr(record, name))
                for text in record.comments:
                    cls._require_text("comment", text)
            except ValueError as e:
                raise SnapshotCorruptError(f"record {key!r}: {e}") from e
            if key in store._records:
                raise SnapshotCorruptError(f"duplicate key in snapshot: {key!r}")
            if task_id >= next_id:
                raise SnapshotCorruptError(
                    f"record id {task_id} is not below next_id {next_id}"
                )
            store._insert(key, record)

        logger.info(
            "TaskStore restored records=%s owners=%s next_id=%s",
            len(store._records),
            len(store._by_owner),
            store._next_id,
        )
        return store

    # ---- public API ----

    def who_am_i(self, owner: str) -> str:
        return owner

    def add_task(self, owner: str, *, title: str, description: str) -> int:
        self._require_text("owner", owner)
        self._require_text("title", title)
        self._require_text("description", description)

        with self._lock:
            task_id = self._next_id
            record = TaskRecord(
                id=task_id,
                owner=owner,
                title=title,
                description=description,
                completed=False,
                created_at=self._next_created_ns(),
            )
            self._insert(encode_key(owner, task_id), record)
            self._next_id = task_id + 1

        logger.debug("Task added id=%s owner=%s", task_id, owner)
        return task_id

    def get_tasks(self, owner: str) -> list[TaskRecord]:
        with self._lock:
            return self._owned(owner)

    def get_task_by_id(self, owner: str, task_id: int) -> TaskRecord | None:
        key = self._key(owner, task_id)
        if key is None:
            return None
        with self._lock:
            return self._records.get(key)

    def get_task_count(self, owner: str) -> int:
        with self._lock:
            return len(self._by_owner.get(owner, ()))

    def get_tasks_by_status(self, owner: str, completed: bool) -> list[TaskRecord]:
        with self._lock:
            return [t for t in self._owned(owner) if t.completed == bool(completed)]

    def get_task_stats(self, owner: str) -> TaskStats:
        with self._lock:
            tasks = self._owned(owner)
        done = sum(1 for t in tasks if t.completed)
        return TaskStats(total=len(tasks), completed=done, pending=len(tasks) - done)

    def toggle_status(self, owner: str, task_id: int) -> bool:
        key = self._key(owner, task_id)
        if key is None:
            return False
        with self._lock:
            record = self._records.get(key)
            if record is None:
                return False
            self._records[key] = dataclasses.replace(record, completed=not record.completed)
        logger.debug("Task toggled id=%s owner=%s completed=%s", task_id, owner, not record.completed)
        return True

    def delete_task(self, owner: str, task_id: int) -> bool:
        with self._lock:
            removed = self._remove(owner, task_id)
        if removed:
            logger.debug("Task deleted id=%s owner=%s", task_id, owner)
        return removed

    def clear_completed_tasks(self, owner: str) -> int:
        with self._lock:
            done_ids = [t.id for t in self._owned(owner) if t.completed]
            removed = sum(1 for task_id in done_ids if self._remove(owner, task_id))
        if removed:
            logger.debug("Cleared completed tasks owner=%s removed=%s", owner, removed)
        return removed

    def add_comment(self, owner: str, task_id: int, text: str) -> bool:
        self._require_text("comment", text)
        key = self._key(owner, task_id)
        if key is None:
            return False
        with self._lock:
            record = self._records.get(key)
            if record is None:
                return False
            self._records[key] = dataclasses.replace(record, comments=(*record.comments, text))
        logger.debug("Comment added task_id=%s owner=%s", task_id, owner)
        return True

    def get_comments(self, owner: str, task_id: int) -> list[str]:
        key = self._key(owner, task_id)
        if key is None:
            return []
        with self._lock:
            record = self._records.get(key)
            return list(record.comments) if record is not None else []

