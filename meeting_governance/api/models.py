"""Pydantic request/response schemas for the Meeting Governance API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ActionItemIn(BaseModel):
    """An action item supplied by the caller instead of the extracted ones."""

    task: str
    assignee: str = ""
    deadline: str = ""


class ProposalRequest(BaseModel):
    """Request body for the /api/proposals endpoint."""

    transcript: str
    channel: str
    project_id: str
    project_name: str = ""
    meeting_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    actions: list[ActionItemIn] | None = None


class ProposalResponse(BaseModel):
    """Response body for the /api/proposals endpoint."""

    presented: bool
    decisions_count: int = 0
    actions_count: int = 0
    handle: str | None = None


class ApprovalRequest(BaseModel):
    """A single approval click, for callers that are not Slack."""

    action_id: str
    presentation_handle: str
    channel: str
    value: str | None = None


class ApprovalResponse(BaseModel):
    success: bool
    message: str


class SlackActionsResponse(BaseModel):
    """Results of every action contained in one Slack interactivity payload."""

    results: list[ApprovalResponse] = []


class PendingProposalResponse(BaseModel):
    """A proposal still awaiting a whole-batch decision."""

    handle: str
    project_id: str
    project_name: str | None = None
    meeting_date: str
    channel_id: str
    created_at: float
    decisions: list[dict[str, Any]] = []
    actions: list[dict[str, Any]] = []
