"""Pending proposal awaiting human approval."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from meeting_governance.extraction.models import Action, Decision


@dataclass(frozen=True)
class Proposal:
    """A batch of extracted decisions and actions tied to one Slack message.

    Items are addressed by their position in ``decisions`` / ``actions``;
    both sequences are tuples and never change after creation.
    """

    project_id: str
    meeting_date: str
    channel_id: str
    created_at: float
    decisions: tuple[Decision, ...] = field(default_factory=tuple)
    actions: tuple[Action, ...] = field(default_factory=tuple)
    project_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "project_name": self.project_name,
            "meeting_date": self.meeting_date,
            "channel_id": self.channel_id,
            "created_at": self.created_at,
            "decisions": [d.to_dict() for d in self.decisions],
            "actions": [a.to_dict() for a in self.actions],
        }
