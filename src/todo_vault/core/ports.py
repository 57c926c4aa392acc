# src/todo_vault/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the request boundary and the CLI.

They depend on this Protocol rather than on TaskStore directly, so tests
(or another storage engine) can stand in for the in-memory store.
"""

from typing import Any, Protocol


class TaskRepo(Protocol):
    # Per-owner CRUD
    def add_task(self, owner: str, *, title: str, description: str) -> int: ...
    def get_tasks(self, owner: str) -> list[Any]: ...
    def get_task_by_id(self, owner: str, task_id: int) -> Any | None: ...
    def toggle_status(self, owner: str, task_id: int) -> bool: ...
    def delete_task(self, owner: str, task_id: int) -> bool: ...

    # Queries / aggregates
    def get_task_count(self, owner: str) -> int: ...
    def get_tasks_by_status(self, owner: str, completed: bool) -> list[Any]: ...
    def get_task_stats(self, owner: str) -> Any: ...
    def clear_completed_tasks(self, owner: str) -> int: ...

    # Comments (append-only)
    def add_comment(self, owner: str, task_id: int, text: str) -> bool: ...
    def get_comments(self, owner: str, task_id: int) -> list[str]: ...

    def who_am_i(self, owner: str) -> str: ...

    # Durability (process boundaries only)
    def snapshot(self) -> Any: ...
