"""Commit approved decisions to the project's repository as Markdown files."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from meeting_governance.config import settings
from meeting_governance.errors import DocumentNotFoundError
from meeting_governance.extraction.models import Decision
from meeting_governance.projects import ProjectRegistry, get_project_registry
from meeting_governance.sinks.github import DocumentStore, GitHubDocumentStore
from meeting_governance.sinks.models import CommitOutcome
from meeting_governance.slugs import decision_file_name

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND = "(Decision based on the meeting discussion)"


def decision_path(decision: Decision, meeting_date: str) -> str:
    """Repository path for a decision, e.g. ``_codex/decisions/2025-01-15_api-design.md``."""
    directory = settings.decisions_dir.strip("/")
    return f"{directory}/{decision_file_name(meeting_date, decision.content)}"


def render_decision_markdown(decision: Decision, meeting_date: str) -> str:
    """Render the Markdown body stored for one decision."""
    lines = [
        f"# {decision.content}",
        "",
        f"- Decided: {decision.date or meeting_date}",
        "- Status: decided",
        f"- Source: {meeting_date} meeting",
        "",
        "## Background",
        "",
        decision.context or DEFAULT_BACKGROUND,
        "",
    ]
    return "\n".join(lines)


def commit_message(meeting_date: str) -> str:
    return f"docs: add decision ({meeting_date} meeting)"


def commit_decisions(
    decisions: Sequence[Decision],
    project_id: str,
    meeting_date: str,
    *,
    store: DocumentStore | None = None,
    projects: ProjectRegistry | None = None,
) -> CommitOutcome:
    """Write each decision to the project's document store.

    Each decision is read first; if a version exists its sha is passed back
    on write so a concurrent change is rejected rather than overwritten. One
    failing decision never stops the rest of the batch.

    Args:
        decisions: Approved decisions, in proposal order.
        project_id: Project whose GitHub destination is used.
        meeting_date: ``YYYY-MM-DD`` date used in file names and bodies.
        store: Document store; defaults to GitHub for the resolved destination.
        projects: Project registry; defaults to the cached config file.

    Returns:
        A CommitOutcome with per-decision failures collected in ``errors``.
    """
    if not decisions:
        return CommitOutcome()

    registry = projects or get_project_registry()
    destination = registry.resolve_document_destination(project_id)
    if destination is None:
        logger.warning("No GitHub destination configured for project %s", project_id)
        return CommitOutcome.unconfigured(
            len(decisions), f"No GitHub configuration for project {project_id}"
        )

    store = store or GitHubDocumentStore(destination)
    outcome = CommitOutcome()

    for decision in decisions:
        try:
            path = decision_path(decision, meeting_date)

            sha: str | None = None
            try:
                sha = store.get(path).sha
            except DocumentNotFoundError:
                sha = None

            body = render_decision_markdown(decision, meeting_date)
            store.put(path, body, commit_message(meeting_date), sha=sha)
            outcome.record_success()
            logger.info("Committed decision to %s (%s)", path, "update" if sha else "create")
        except Exception as exc:
            logger.exception("Failed to commit decision for project %s", project_id)
            outcome.record_failure(decision.content, str(exc))

    return outcome
