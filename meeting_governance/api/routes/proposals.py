"""Proposal endpoints: extract a transcript and post it for review."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException

from meeting_governance.api.models import (
    PendingProposalResponse,
    ProposalRequest,
    ProposalResponse,
)
from meeting_governance.extraction.models import Action
from meeting_governance.pipeline import get_pipeline

router = APIRouter()


@router.post("/api/proposals", response_model=ProposalResponse)
async def create_proposal(request: ProposalRequest) -> ProposalResponse:
    """Extract decisions and actions and post them to Slack for approval.

    Returns ``presented: false`` when nothing was extracted. Upstream failures
    (Claude or Slack) return 503.
    """
    pipeline = get_pipeline()
    actions = [
        Action(task=a.task, assignee=a.assignee, deadline=a.deadline)
        for a in request.actions or []
    ]

    result = await asyncio.to_thread(
        pipeline.present_proposal,
        request.transcript,
        request.channel,
        request.project_id,
        request.project_name,
        request.meeting_date,
        actions or None,
    )
    if not result.presented and result.error:
        raise HTTPException(status_code=503, detail="Proposal could not be presented")

    return ProposalResponse(
        presented=result.presented,
        decisions_count=result.decisions_count,
        actions_count=result.actions_count,
        handle=result.handle,
    )


@router.get("/api/proposals/{handle}", response_model=PendingProposalResponse)
async def get_proposal(handle: str) -> PendingProposalResponse:
    """Return a proposal that is still awaiting approval."""
    proposal = get_pipeline().pending(handle)
    if proposal is None:
        raise HTTPException(status_code=404, detail="Proposal not found")

    return PendingProposalResponse(handle=handle, **proposal.to_dict())
