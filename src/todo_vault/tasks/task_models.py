# src/todo_vault/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Human-facing view of TaskRecord.completed.

    Stored records only keep the boolean; the enum exists for filters and
    console output ("/list done", "/list active").
    """

    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def of(cls, completed: bool) -> TaskStatus:
        return cls.COMPLETED if completed else cls.ACTIVE

    @classmethod
    def parse(cls, raw: str | None) -> TaskStatus | None:
        s = (raw or "").strip().lower()
        if s in ("done", "completed", "complete", "finished"):
            return cls.COMPLETED
        if s in ("active", "pending", "open", "todo"):
            return cls.ACTIVE
        return None


@dataclass(frozen=True, slots=True)
class TaskRecord:
    id: int
    owner: str
    title: str
    description: str
    completed: bool
    created_at: int  # ns since epoch

    comments: tuple[str, ...] = field(default_factory=tuple)

    @property
    def status(self) -> TaskStatus:
        return TaskStatus.of(self.completed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "created_at": self.created_at,
            "comments": list(self.comments),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskRecord:
        """Strict inverse of to_dict(); raises KeyError/TypeError/ValueError on bad input."""
        comments = data["comments"]
        if not isinstance(comments, list) or not all(isinstance(c, str) for c in comments):
            raise TypeError("comments must be a list of strings")
        task_id = data["id"]
        created_at = data["created_at"]
        # bool is an int subclass; reject it explicitly
        if isinstance(task_id, bool) or not isinstance(task_id, int):
            raise TypeError("id must be an integer")
        if isinstance(created_at, bool) or not isinstance(created_at, int):
            raise TypeError("created_at must be an integer")
        if not isinstance(data["completed"], bool):
            raise TypeError("completed must be a boolean")
        for name in ("owner", "title", "description"):
            if not isinstance(data[name], str):
                raise TypeError(f"{name} must be a string")
        return cls(
            id=task_id,
            owner=data["owner"],
            title=data["title"],
            description=data["description"],
            completed=data["completed"],
            created_at=created_at,
            comments=tuple(comments),
        )


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    pending: int

    @property
    def percent_complete(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.completed * 100 / self.total)
