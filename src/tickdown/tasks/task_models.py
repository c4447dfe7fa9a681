# src/tickdown/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class DialogKind(StrEnum):
    ADD = "add"
    EDIT = "edit"


class TaskVisualState(StrEnum):
    """How a task should be highlighted by a presentation layer."""

    ACTIVE = "active"
    EXPIRED = "expired"
    COMPLETED = "completed"


def parse_deadline(raw: str) -> datetime:
    """
    Parse an ISO-8601 deadline into an aware datetime.

    A value without a UTC offset (e.g. "2025-01-31T18:00" from a datetime-local
    input) is interpreted in the local timezone.
    Raises ValueError for anything fromisoformat() rejects.
    """
    s = (raw or "").strip()
    if not s:
        raise ValueError("empty deadline")
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def is_valid_deadline(raw: str) -> bool:
    try:
        parse_deadline(raw)
    except ValueError:
        return False
    return True


@dataclass(slots=True, frozen=True)
class TaskDraft:
    """Label + deadline pair as collected by the Add/Edit dialog."""

    text: str
    deadline: str


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    text: str
    deadline: str
    completed: bool = False

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Task:
        return cls(
            id=str(record.get("id") or ""),
            text=str(record.get("text") or ""),
            deadline=str(record.get("deadline") or ""),
            completed=bool(record.get("completed", False)),
        )

    def to_fields(self) -> dict[str, Any]:
        """Remote representation (everything except the id)."""
        return {"text": self.text, "completed": self.completed, "deadline": self.deadline}

    def deadline_at(self) -> datetime:
        return parse_deadline(self.deadline)
