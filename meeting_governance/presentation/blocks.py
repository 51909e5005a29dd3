"""Slack Block Kit payloads for proposal review messages."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from meeting_governance.approval.commands import (
    APPROVE_ALL_ACTION_ID,
    REJECT_ALL_ACTION_ID,
    ItemType,
    item_action_id,
)
from meeting_governance.extraction.models import Action, Decision

Block = dict[str, Any]


def _mrkdwn_section(text: str) -> Block:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _button(text: str, action_id: str, value: dict[str, Any], style: str) -> Block:
    return {
        "type": "button",
        "text": {"type": "plain_text", "text": text, "emoji": True},
        "style": style,
        "action_id": action_id,
        "value": json.dumps(value, ensure_ascii=False),
    }


def _approve_reject(item_type: ItemType, index: int, value: dict[str, Any]) -> Block:
    return {
        "type": "actions",
        "elements": [
            _button("✅ Approve", item_action_id("approve", item_type, index), value, "primary"),
            _button("❌ Reject", item_action_id("reject", item_type, index), value, "danger"),
        ],
    }


def build_decision_block(decision: Decision, index: int) -> list[Block]:
    text = f"*Decision #{index + 1}*\n{decision.content}"
    if decision.context:
        text += f"\n_Background: {decision.context}_"
    value = {"type": ItemType.DECISION.value, "index": index, "content": decision.content}
    return [
        _mrkdwn_section(text),
        _approve_reject(ItemType.DECISION, index, value),
        {"type": "divider"},
    ]


def build_action_block(action: Action, index: int) -> list[Block]:
    text = (
        f"*Task #{index + 1}*\n📋 {action.task}\n"
        f"👤 Assignee: {action.assignee}\n📅 Deadline: {action.deadline}"
    )
    value = {
        "type": ItemType.ACTION.value,
        "index": index,
        "task": action.task,
        "assignee": action.assignee,
        "deadline": action.deadline,
    }
    return [
        _mrkdwn_section(text),
        _approve_reject(ItemType.ACTION, index, value),
        {"type": "divider"},
    ]


def proposal_title(project_label: str, meeting_date: str) -> str:
    return f"📋 Meeting review - {project_label} ({meeting_date})"


def build_summary_block(
    project_label: str, meeting_date: str, decisions_count: int, actions_count: int
) -> list[Block]:
    batch_value = {"project": project_label, "meeting_date": meeting_date}
    return [
        {
            "type": "header",
            "text": {
                "type": "plain_text",
                "text": f"📋 Meeting review - {project_label}",
                "emoji": True,
            },
        },
        {
            "type": "context",
            "elements": [
                {
                    "type": "mrkdwn",
                    "text": (
                        f"📅 {meeting_date} | Decisions: {decisions_count} | "
                        f"Tasks: {actions_count}"
                    ),
                }
            ],
        },
        {"type": "divider"},
        {
            "type": "actions",
            "elements": [
                _button("✅ Approve all", APPROVE_ALL_ACTION_ID, batch_value, "primary"),
                _button("❌ Reject all", REJECT_ALL_ACTION_ID, batch_value, "danger"),
            ],
        },
        {"type": "divider"},
    ]


def build_proposal_blocks(
    decisions: Sequence[Decision],
    actions: Sequence[Action],
    project_label: str,
    meeting_date: str,
) -> list[Block]:
    """Full review message: summary, then one approve/reject row per item."""
    blocks = build_summary_block(project_label, meeting_date, len(decisions), len(actions))

    if decisions:
        blocks.append(_mrkdwn_section("*📌 Decisions*"))
        for index, decision in enumerate(decisions):
            blocks.extend(build_decision_block(decision, index))
    else:
        blocks.append(_mrkdwn_section("*📌 Decisions*\n_No decisions_"))

    if actions:
        blocks.append(_mrkdwn_section("*📋 Tasks*"))
        for index, action in enumerate(actions):
            blocks.extend(build_action_block(action, index))
    else:
        blocks.append(_mrkdwn_section("*📋 Tasks*\n_No tasks_"))

    return blocks


def build_final_blocks(status: str) -> list[Block]:
    """Replacement message shown after approve-all / reject-all."""
    return [_mrkdwn_section(f"📋 *Meeting review complete*\n\n{status}")]
