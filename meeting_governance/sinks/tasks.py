"""Register approved meeting actions as new task records."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import Any

from meeting_governance.config import settings
from meeting_governance.deadlines import parse_deadline
from meeting_governance.extraction.models import Action
from meeting_governance.projects import ProjectRegistry, get_project_registry
from meeting_governance.sinks.models import CommitOutcome
from meeting_governance.sinks.records import RecordStore, get_record_store

logger = logging.getLogger(__name__)

INITIAL_STATUS = "pending"
SOURCE_MARKER = "meeting"  # distinguishes meeting intake from other task sources


def build_task_fields(action: Action, meeting_date: str, today: date | None = None) -> dict[str, Any]:
    """Fields for a new task record; ``due_date`` only when the deadline parses."""
    fields: dict[str, Any] = {
        "title": action.task,
        "assignee": action.assignee,
        "status": INITIAL_STATUS,
        "source": SOURCE_MARKER,
        "meeting_date": meeting_date,
    }
    due = parse_deadline(action.deadline, today=today)
    if due is not None:
        fields["due_date"] = due.isoformat()
    return fields


def register_meeting_tasks(
    actions: Sequence[Action],
    project_id: str,
    meeting_date: str,
    *,
    store: RecordStore | None = None,
    projects: ProjectRegistry | None = None,
) -> CommitOutcome:
    """Create one new task record per action.

    No lookup for an existing record is made, so submitting the same action
    twice creates two records.

    Returns:
        A CommitOutcome; ``registered`` counts created records.
    """
    if not actions:
        return CommitOutcome()

    registry = projects or get_project_registry()
    destination = registry.resolve_record_destination(project_id)
    if destination is None:
        logger.warning("No task base configured for project %s", project_id)
        return CommitOutcome.unconfigured(
            len(actions), f"No task base configuration for project {project_id}"
        )

    store = store or get_record_store()
    outcome = CommitOutcome()

    for action in actions:
        try:
            record_id = store.create(
                destination.base_id,
                settings.task_table,
                build_task_fields(action, meeting_date),
            )
            outcome.record_success()
            logger.info("Registered task %s for project %s", record_id, project_id)
        except Exception as exc:
            logger.exception("Failed to register task for project %s", project_id)
            outcome.record_failure(action.task, str(exc))

    return outcome
