"""Parse Slack button interactions into approval commands."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class CommandKind(StrEnum):
    APPROVE_ITEM = "approve-item"
    REJECT_ITEM = "reject-item"
    APPROVE_ALL = "approve-all"
    REJECT_ALL = "reject-all"


class ItemType(StrEnum):
    DECISION = "decision"
    ACTION = "action"


APPROVE_ALL_ACTION_ID = "approve_all"
REJECT_ALL_ACTION_ID = "reject_all"

_ITEM_ACTION_ID = re.compile(r"^(approve|reject)_(decision|action)_(\d+)$")


def item_action_id(verb: str, item_type: ItemType, index: int) -> str:
    """Slack ``action_id`` for a per-item button, e.g. ``approve_decision_0``."""
    return f"{verb}_{item_type.value}_{index}"


@dataclass(frozen=True)
class ActionCommand:
    """A validated-shape approval command; index bounds are checked on dispatch."""

    kind: CommandKind
    raw_value: str | None = None
    item_type: ItemType | None = None
    index: int | None = None
    label: str | None = None  # content/task echoed in the button value

    @property
    def is_batch(self) -> bool:
        return self.kind in (CommandKind.APPROVE_ALL, CommandKind.REJECT_ALL)


def parse_action_value(value: str | None) -> dict[str, Any] | None:
    """Decode a button value; ``None`` unless it is a JSON object."""
    if not value:
        return None
    try:
        parsed = json.loads(value)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_action_command(action_id: str, value: str | None = None) -> ActionCommand | None:
    """Build an ActionCommand from a Slack ``action_id`` and button value.

    Returns ``None`` for unknown action ids and for per-item buttons whose
    value is not a JSON object.
    """
    if action_id == APPROVE_ALL_ACTION_ID:
        return ActionCommand(kind=CommandKind.APPROVE_ALL, raw_value=value)
    if action_id == REJECT_ALL_ACTION_ID:
        return ActionCommand(kind=CommandKind.REJECT_ALL, raw_value=value)

    match = _ITEM_ACTION_ID.match(action_id or "")
    if not match:
        return None

    payload = parse_action_value(value)
    if payload is None:
        return None

    verb, item_type, index = match.groups()
    label = payload.get("content") or payload.get("task")
    return ActionCommand(
        kind=CommandKind.APPROVE_ITEM if verb == "approve" else CommandKind.REJECT_ITEM,
        raw_value=value,
        item_type=ItemType(item_type),
        index=int(index),
        label=str(label) if label else None,
    )
