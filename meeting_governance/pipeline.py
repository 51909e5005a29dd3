"""Orchestrates extraction -> Slack review -> approval -> sinks.

Usage:
    1. After a meeting transcript is available, call ``present_proposal``.
    2. Route Slack button clicks to ``handle_approval_event``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from meeting_governance.approval.commands import ActionCommand, CommandKind, parse_action_command
from meeting_governance.approval.handler import ApprovalHandler, ApprovalOutcome
from meeting_governance.config import settings
from meeting_governance.extraction.extractor import extract_decisions_and_actions
from meeting_governance.extraction.models import Action, ExtractionResult
from meeting_governance.presentation.blocks import (
    build_final_blocks,
    build_proposal_blocks,
    proposal_title,
)
from meeting_governance.presentation.slack import Presenter, SlackPresenter
from meeting_governance.proposals.models import Proposal
from meeting_governance.proposals.store import ProposalStore

logger = logging.getLogger(__name__)

ExtractFn = Callable[[str, str, str], ExtractionResult]

CONTEXT_NOT_FOUND_MESSAGE = (
    "This review is no longer available. Please process the meeting notes again."
)
INVALID_ACTION_MESSAGE = "This button could not be read. Please process the meeting notes again."
INTERNAL_ERROR_MESSAGE = "Something went wrong while processing this action."


@dataclass(frozen=True)
class ApprovalEvent:
    """One button click delivered by the approval transport."""

    action_id: str
    presentation_handle: str
    channel: str
    value: str | None = None


@dataclass
class PresentationResult:
    presented: bool
    decisions_count: int = 0
    actions_count: int = 0
    handle: str | None = None
    error: str | None = None


@dataclass
class ApprovalResult:
    success: bool
    message: str
    outcome: ApprovalOutcome | None = None


def build_status_message(command: ActionCommand, outcome: ApprovalOutcome) -> str:
    """Short, user-facing status line for an outcome; never includes internal errors."""
    if outcome.kind is CommandKind.APPROVE_ALL:
        message = (
            "✅ Approved all\n"
            f"- Decisions: {outcome.decisions_committed} → GitHub\n"
            f"- Tasks: {outcome.actions_registered} → task tracker"
        )
        if outcome.items_failed:
            message += f"\n⚠️ {outcome.items_failed} item(s) could not be saved"
        return message

    if outcome.kind is CommandKind.REJECT_ALL:
        return (
            "❌ Rejected all\n"
            f"- Decisions: {outcome.decisions_rejected}\n"
            f"- Tasks: {outcome.actions_rejected}"
        )

    label = outcome.subject or command.label
    if not label and command.item_type is not None and command.index is not None:
        label = f"{command.item_type.value} #{command.index + 1}"

    if outcome.kind is CommandKind.REJECT_ITEM:
        return f"❌ Rejected: {label}"
    if outcome.success:
        return f"✅ Approved: {label}"
    return f"⚠️ Could not approve: {label}"


class MeetingProposalPipeline:
    """Owns the proposal store and wires the collaborators together."""

    def __init__(
        self,
        store: ProposalStore | None = None,
        presenter: Presenter | None = None,
        handler: ApprovalHandler | None = None,
        extract: ExtractFn = extract_decisions_and_actions,
    ) -> None:
        self.store = store or ProposalStore(ttl_seconds=settings.proposal_ttl_seconds)
        self._presenter = presenter
        self.handler = handler or ApprovalHandler()
        self._extract = extract

    @property
    def presenter(self) -> Presenter:
        if self._presenter is None:
            self._presenter = SlackPresenter()
        return self._presenter

    def present_proposal(
        self,
        transcript: str,
        channel: str,
        project_id: str,
        project_name: str,
        meeting_date: str,
        precomputed_actions: Sequence[Action] | None = None,
    ) -> PresentationResult:
        """Extract decisions/actions and post them to Slack for review.

        A non-empty ``precomputed_actions`` replaces the extracted actions.
        Nothing is posted or stored when both lists are empty.
        """
        try:
            extraction = self._extract(transcript, project_name, meeting_date)
            decisions = tuple(extraction.decisions)
            actions = tuple(precomputed_actions) if precomputed_actions else tuple(extraction.actions)

            if not decisions and not actions:
                logger.info("No decisions or actions found for %s, skipping review", project_id)
                return PresentationResult(presented=False, error=extraction.error)

            label = project_name or project_id
            blocks = build_proposal_blocks(decisions, actions, label, meeting_date)
            handle = self.presenter.post_message(
                channel, blocks, proposal_title(label, meeting_date)
            )

            self.store.put(
                handle,
                Proposal(
                    project_id=project_id,
                    project_name=project_name,
                    meeting_date=meeting_date,
                    decisions=decisions,
                    actions=actions,
                    channel_id=channel,
                    created_at=self.store.now(),
                ),
            )
            logger.info(
                "Proposal posted: %s, decisions: %d, actions: %d",
                handle,
                len(decisions),
                len(actions),
            )
            return PresentationResult(
                presented=True,
                decisions_count=len(decisions),
                actions_count=len(actions),
                handle=handle,
            )
        except Exception as exc:
            logger.exception("Failed to present proposal for project %s", project_id)
            return PresentationResult(presented=False, error=str(exc))

    def handle_approval_event(self, event: ApprovalEvent) -> ApprovalResult:
        """Apply one button click to the proposal it was posted with."""
        proposal = self.store.get(event.presentation_handle)
        if proposal is None:
            logger.warning("No proposal found for message %s", event.presentation_handle)
            return ApprovalResult(success=False, message=CONTEXT_NOT_FOUND_MESSAGE)

        command = parse_action_command(event.action_id, event.value)
        if command is None:
            logger.warning("Unrecognised approval action %s", event.action_id)
            return ApprovalResult(success=False, message=INVALID_ACTION_MESSAGE)

        try:
            outcome = self.handler.dispatch(command, proposal)
        except Exception:
            logger.exception("Approval action %s failed", event.action_id)
            return ApprovalResult(success=False, message=INTERNAL_ERROR_MESSAGE)

        if outcome.error:
            logger.warning("Approval action %s: %s", event.action_id, outcome.error)
        message = build_status_message(command, outcome)

        if command.is_batch:
            self._finalize(event, message)

        return ApprovalResult(success=outcome.success, message=message, outcome=outcome)

    def _finalize(self, event: ApprovalEvent, message: str) -> None:
        """Replace the review message with the final status and evict the proposal."""
        try:
            self.presenter.update_message(
                event.channel, event.presentation_handle, build_final_blocks(message), message
            )
        except Exception:
            logger.exception("Failed to update review message %s", event.presentation_handle)
        self.store.pop(event.presentation_handle)

    def pending(self, handle: str) -> Proposal | None:
        return self.store.get(handle)


@lru_cache(maxsize=1)
def get_pipeline() -> MeetingProposalPipeline:
    """Process-wide pipeline used by the API."""
    return MeetingProposalPipeline()


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def approval_events_from_slack(payload: dict[str, Any]) -> list[ApprovalEvent]:
    """Turn a Slack ``block_actions`` payload into approval events.

    Fields of the wrong shape are treated as absent.
    """
    message = _mapping(payload.get("message"))
    container = _mapping(payload.get("container"))
    channel = _mapping(payload.get("channel"))
    handle = message.get("ts") or container.get("message_ts") or ""
    channel_id = channel.get("id") or container.get("channel_id") or ""
    actions = payload.get("actions")
    if not isinstance(actions, list):
        actions = []
    return [
        ApprovalEvent(
            action_id=str(action.get("action_id", "")),
            value=action["value"] if isinstance(action.get("value"), str) else None,
            presentation_handle=str(handle),
            channel=str(channel_id),
        )
        for action in actions
        if isinstance(action, dict)
    ]
