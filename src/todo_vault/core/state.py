# src/todo_vault/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules.
    settings: object

    task_store: TaskRepo

    # Identity the console acts as; "" until configured or /login.
    owner: str = ""
