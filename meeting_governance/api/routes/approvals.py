"""Approval endpoints: Slack interactivity callbacks and a plain JSON variant."""

from __future__ import annotations

import asyncio
import json
from typing import Annotated, Any

from fastapi import APIRouter, Form, HTTPException

from meeting_governance.api.models import (
    ApprovalRequest,
    ApprovalResponse,
    SlackActionsResponse,
)
from meeting_governance.pipeline import ApprovalEvent, approval_events_from_slack, get_pipeline

router = APIRouter()


@router.post("/api/approvals", response_model=ApprovalResponse)
async def approve(request: ApprovalRequest) -> ApprovalResponse:
    """Apply one approval click to a pending proposal."""
    event = ApprovalEvent(
        action_id=request.action_id,
        presentation_handle=request.presentation_handle,
        channel=request.channel,
        value=request.value,
    )
    result = await asyncio.to_thread(get_pipeline().handle_approval_event, event)
    return ApprovalResponse(success=result.success, message=result.message)


@router.post("/api/slack/actions", response_model=SlackActionsResponse)
async def slack_actions(payload: Annotated[str, Form()]) -> SlackActionsResponse:
    """Slack interactivity endpoint (``block_actions`` payloads).

    Slack posts a form with a single ``payload`` field containing JSON.
    """
    try:
        data: Any = json.loads(payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid Slack payload") from exc
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Invalid Slack payload")

    pipeline = get_pipeline()
    results: list[ApprovalResponse] = []
    for event in approval_events_from_slack(data):
        result = await asyncio.to_thread(pipeline.handle_approval_event, event)
        results.append(ApprovalResponse(success=result.success, message=result.message))
    return SlackActionsResponse(results=results)
