"""Data models for extracted decisions and action items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Decision:
    """A qualitative statement agreed upon in a meeting."""

    content: str
    context: str | None = None
    date: str | None = None  # meeting date, stamped after extraction

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Decision:
        context = data.get("context")
        return cls(
            content=_text(data.get("content")),
            context=_text(context) if context else None,
            date=data.get("date"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content, "context": self.context, "date": self.date}


@dataclass(frozen=True)
class Action:
    """A task candidate with an assignee and a human-written deadline."""

    task: str
    assignee: str = ""
    deadline: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Action:
        return cls(
            task=_text(data.get("task")),
            assignee=_text(data.get("assignee")),
            deadline=_text(data.get("deadline")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"task": self.task, "assignee": self.assignee, "deadline": self.deadline}


@dataclass
class ExtractionResult:
    """Decisions and actions parsed from model output.

    ``parse_error`` is set when the model text could not be parsed;
    ``error`` is set when the extraction step itself failed.
    """

    decisions: list[Decision] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    parse_error: str | None = None
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.decisions and not self.actions
