# src/todo_vault/tasks/task_api.py

"""
Request boundary in front of the task store.

Every helper takes the AppState and the verified caller identity. Text is
stripped and checked against the configured limits here; the store below
trusts what it receives. Missing or foreign tasks come back as False /
None / [] exactly as the store reports them.
"""

from __future__ import annotations

import logging

from ..core.state import AppState
from .task_models import TaskRecord, TaskStats

logger = logging.getLogger(__name__)


class TaskValidationError(ValueError):
    """Caller input rejected before it reaches the store."""


def _limits(state: AppState) -> tuple[int, int, int]:
    s = state.settings
    return (
        int(getattr(s, "max_title_len", 100)),
        int(getattr(s, "max_description_len", 500)),
        int(getattr(s, "max_comment_len", 200)),
    )


def _require_owner(owner: str | None) -> str:
    if not owner or not owner.strip():
        raise TaskValidationError("Not signed in: no caller identity.")
    return owner


def _clean_text(label: str, value: str | None, max_len: int) -> str:
    text = (value or "").strip()
    if not text:
        raise TaskValidationError(f"{label} must not be empty.")
    if len(text) > max_len:
        raise TaskValidationError(f"{label} must be at most {max_len} characters.")
    return text


def add_task(state: AppState, owner: str | None, title: str, description: str) -> int:
    owner = _require_owner(owner)
    max_title, max_desc, _ = _limits(state)
    title = _clean_text("Title", title, max_title)
    description = _clean_text("Description", description, max_desc)

    task_id = state.task_store.add_task(owner, title=title, description=description)
    logger.info("Task created id=%s owner=%s", task_id, owner)
    return task_id


def list_tasks(state: AppState, owner: str | None) -> list[TaskRecord]:
    return state.task_store.get_tasks(_require_owner(owner))


def get_task(state: AppState, owner: str | None, task_id: int) -> TaskRecord | None:
    return state.task_store.get_task_by_id(_require_owner(owner), task_id)


def toggle_task(state: AppState, owner: str | None, task_id: int) -> bool:
    return state.task_store.toggle_status(_require_owner(owner), task_id)


def delete_task(state: AppState, owner: str | None, task_id: int) -> bool:
    return state.task_store.delete_task(_require_owner(owner), task_id)


def count_tasks(state: AppState, owner: str | None) -> int:
    return state.task_store.get_task_count(_require_owner(owner))


def list_tasks_by_status(state: AppState, owner: str | None, completed: bool) -> list[TaskRecord]:
    return state.task_store.get_tasks_by_status(_require_owner(owner), completed)


def clear_completed(state: AppState, owner: str | None) -> int:
    owner = _require_owner(owner)
    removed = state.task_store.clear_completed_tasks(owner)
    if removed:
        logger.info("Cleared %d completed tasks owner=%s", removed, owner)
    return removed


def add_comment(state: AppState, owner: str | None, task_id: int, text: str) -> bool:
    owner = _require_owner(owner)
    _, _, max_comment = _limits(state)
    text = _clean_text("Comment", text, max_comment)
    return state.task_store.add_comment(owner, task_id, text)


def list_comments(state: AppState, owner: str | None, task_id: int) -> list[str]:
    return state.task_store.get_comments(_require_owner(owner), task_id)


def task_stats(state: AppState, owner: str | None) -> TaskStats:
    return state.task_store.get_task_stats(_require_owner(owner))


def who_am_i(state: AppState, owner: str | None) -> str:
    return state.task_store.who_am_i(_require_owner(owner))
