"""Approval state machine: turn a command into sink calls and a normalized outcome.

Transitions from a live proposal:

* approve-item -- commit one decision or register one action.
* reject-item  -- acknowledgement only.
* approve-all  -- commit every decision and register every action.
* reject-all   -- acknowledgement only, reporting the batch sizes.

The handler keeps no per-item state. Re-approving an item is only as
idempotent as the sink behind it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from meeting_governance.approval.commands import ActionCommand, CommandKind, ItemType
from meeting_governance.extraction.models import Action, Decision
from meeting_governance.proposals.models import Proposal
from meeting_governance.sinks.decisions import commit_decisions
from meeting_governance.sinks.models import CommitOutcome
from meeting_governance.sinks.tasks import register_meeting_tasks

logger = logging.getLogger(__name__)

DecisionSink = Callable[[Sequence[Decision], str, str], CommitOutcome]
TaskSink = Callable[[Sequence[Action], str, str], CommitOutcome]


@dataclass
class ApprovalOutcome:
    """Result of one transition."""

    kind: CommandKind
    success: bool = True
    item_type: ItemType | None = None
    index: int | None = None
    subject: str | None = None
    committed: int = 0  # approve-item
    decisions_committed: int = 0  # approve-all
    actions_registered: int = 0  # approve-all
    items_failed: int = 0  # approve-all, includes items skipped by an unconfigured sink
    decisions_rejected: int = 0  # reject-all
    actions_rejected: int = 0  # reject-all
    errors: list[dict[str, str]] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, "success": self.success}
        if self.kind is CommandKind.APPROVE_ALL:
            data["decisions_committed"] = self.decisions_committed
            data["actions_registered"] = self.actions_registered
            data["items_failed"] = self.items_failed
        elif self.kind is CommandKind.REJECT_ALL:
            data["decisions_rejected"] = self.decisions_rejected
            data["actions_rejected"] = self.actions_rejected
        else:
            data["item_type"] = self.item_type.value if self.item_type else None
            data["index"] = self.index
            data["committed"] = self.committed
        if self.errors:
            data["errors"] = self.errors
        if self.error:
            data["error"] = self.error
        return data


def _sink_errors(label: str, outcome: CommitOutcome) -> list[dict[str, str]]:
    """Flatten a sink outcome into approve-all error entries."""
    if outcome.error:
        return [{"type": label, "error": outcome.error}]
    return [{"type": label, "subject": e.subject, "error": e.reason} for e in outcome.errors]


class ApprovalHandler:
    """Dispatches approval commands against a proposal to the two sinks."""

    def __init__(
        self,
        commit: DecisionSink = commit_decisions,
        register: TaskSink = register_meeting_tasks,
    ) -> None:
        self._commit = commit
        self._register = register

    def dispatch(self, command: ActionCommand, proposal: Proposal) -> ApprovalOutcome:
        if command.kind is CommandKind.APPROVE_ALL:
            return self.approve_all(proposal)
        if command.kind is CommandKind.REJECT_ALL:
            return self.reject_all(proposal)
        if command.kind is CommandKind.REJECT_ITEM:
            return self.reject_item(command)
        return self.approve_item(command, proposal)

    def approve_item(self, command: ActionCommand, proposal: Proposal) -> ApprovalOutcome:
        """Persist a single item as a one-element batch."""
        item_type, index = command.item_type, command.index
        outcome = ApprovalOutcome(kind=CommandKind.APPROVE_ITEM, item_type=item_type, index=index)

        items: Sequence[Decision] | Sequence[Action]
        if item_type is ItemType.DECISION:
            items = proposal.decisions
        elif item_type is ItemType.ACTION:
            items = proposal.actions
        else:
            outcome.success = False
            outcome.error = f"Unknown type: {item_type}"
            return outcome

        if index is None or not 0 <= index < len(items):
            outcome.success = False
            outcome.error = f"{item_type.value.capitalize()} at index {index} not found"
            return outcome

        if item_type is ItemType.DECISION:
            decision = proposal.decisions[index]
            outcome.subject = decision.content
            result = self._commit([decision], proposal.project_id, proposal.meeting_date)
        else:
            action = proposal.actions[index]
            outcome.subject = action.task
            result = self._register([action], proposal.project_id, proposal.meeting_date)

        outcome.success = result.success
        outcome.committed = result.committed
        if result.error:
            outcome.error = result.error
        elif result.errors:
            outcome.error = result.errors[0].reason
        return outcome

    def reject_item(self, command: ActionCommand) -> ApprovalOutcome:
        return ApprovalOutcome(
            kind=CommandKind.REJECT_ITEM,
            item_type=command.item_type,
            index=command.index,
            subject=command.label,
        )

    def approve_all(self, proposal: Proposal) -> ApprovalOutcome:
        """Persist the whole batch; each sink runs even if the other fails."""
        outcome = ApprovalOutcome(kind=CommandKind.APPROVE_ALL)
        errors: list[dict[str, str]] = []

        if proposal.decisions:
            result = self._commit(proposal.decisions, proposal.project_id, proposal.meeting_date)
            outcome.decisions_committed = result.committed
            outcome.items_failed += result.failed
            errors.extend(_sink_errors("decisions", result))

        if proposal.actions:
            result = self._register(proposal.actions, proposal.project_id, proposal.meeting_date)
            outcome.actions_registered = result.registered
            outcome.items_failed += result.failed
            errors.extend(_sink_errors("actions", result))

        if errors:
            outcome.success = False
            outcome.errors = errors
            logger.warning(
                "Approve-all for project %s finished with %d error(s)",
                proposal.project_id,
                len(errors),
            )
        return outcome

    def reject_all(self, proposal: Proposal) -> ApprovalOutcome:
        return ApprovalOutcome(
            kind=CommandKind.REJECT_ALL,
            decisions_rejected=len(proposal.decisions),
            actions_rejected=len(proposal.actions),
        )
