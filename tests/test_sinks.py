"""Tests for the decision commit and task registration sinks."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from meeting_governance.errors import DocumentConflictError, DocumentStoreError
from meeting_governance.extraction.models import Action, Decision
from meeting_governance.projects import ProjectRegistry
from meeting_governance.sinks.decisions import (
    commit_decisions,
    decision_path,
    render_decision_markdown,
)
from meeting_governance.sinks.github import StoredDocument
from meeting_governance.sinks.tasks import build_task_fields, register_meeting_tasks
from tests.fakes import FakeDocumentStore, FakeRecordStore

MEETING_DATE = "2025-01-15"

DECISIONS = [
    Decision(
        content="Adopt GraphQL for the public API",
        context="Client flexibility",
        date=MEETING_DATE,
    ),
    Decision(content="Launch in April", date=MEETING_DATE),
    Decision(content="Monthly price is 50k", date=MEETING_DATE),
]

ACTIONS = [
    Action(task="Draft the schema", assignee="Alice", deadline="2025/01/31"),
    Action(task="Book the launch venue", assignee="山田", deadline="未定"),
]


# ---------------------------------------------------------------------------
# Decision commit sink
# ---------------------------------------------------------------------------


class TestCommitDecisions:
    def test_commits_every_decision(
        self, registry: ProjectRegistry, document_store: FakeDocumentStore
    ) -> None:
        outcome = commit_decisions(
            DECISIONS, "acme", MEETING_DATE, store=document_store, projects=registry
        )

        assert outcome.success is True
        assert outcome.committed == 3
        assert outcome.failed == 0
        assert outcome.errors == []
        assert sorted(document_store.files) == sorted(
            decision_path(d, MEETING_DATE) for d in DECISIONS
        )

    def test_path_layout(self) -> None:
        assert (
            decision_path(DECISIONS[0], MEETING_DATE)
            == "_codex/decisions/2025-01-15_adopt-graphql-for-the-public-a.md"
        )

    def test_committed_body_round_trips(
        self, registry: ProjectRegistry, document_store: FakeDocumentStore
    ) -> None:
        commit_decisions(DECISIONS[:1], "acme", MEETING_DATE, store=document_store, projects=registry)

        stored = document_store.get(decision_path(DECISIONS[0], MEETING_DATE))
        assert DECISIONS[0].content in stored.body
        assert MEETING_DATE in stored.body
        assert "Client flexibility" in stored.body

    def test_empty_batch_makes_no_calls(self, document_store: FakeDocumentStore) -> None:
        projects = MagicMock()
        outcome = commit_decisions([], "acme", MEETING_DATE, store=document_store, projects=projects)

        assert outcome.success is True
        assert (outcome.committed, outcome.failed) == (0, 0)
        assert document_store.gets == []
        assert document_store.puts == []
        projects.resolve_document_destination.assert_not_called()

    def test_unconfigured_project_fails_whole_batch(
        self, registry: ProjectRegistry, document_store: FakeDocumentStore
    ) -> None:
        outcome = commit_decisions(
            DECISIONS, "tasks-only", MEETING_DATE, store=document_store, projects=registry
        )

        assert outcome.success is False
        assert outcome.committed == 0
        assert outcome.failed == len(DECISIONS)
        assert outcome.error
        assert document_store.gets == []
        assert document_store.puts == []

    def test_existing_file_is_updated_with_its_sha(
        self, registry: ProjectRegistry, document_store: FakeDocumentStore
    ) -> None:
        path = decision_path(DECISIONS[1], MEETING_DATE)
        document_store.files[path] = StoredDocument(body="old", sha="sha-existing")

        outcome = commit_decisions(
            DECISIONS[1:2], "acme", MEETING_DATE, store=document_store, projects=registry
        )

        assert outcome.committed == 1
        assert document_store.puts[0]["sha"] == "sha-existing"
        assert "Launch in April" in document_store.files[path].body

    def test_new_file_is_written_without_sha(
        self, registry: ProjectRegistry, document_store: FakeDocumentStore
    ) -> None:
        commit_decisions(DECISIONS[:1], "acme", MEETING_DATE, store=document_store, projects=registry)
        assert document_store.puts[0]["sha"] is None

    def test_recommit_is_an_update_not_a_duplicate(
        self, registry: ProjectRegistry, document_store: FakeDocumentStore
    ) -> None:
        commit_decisions(DECISIONS[:1], "acme", MEETING_DATE, store=document_store, projects=registry)
        outcome = commit_decisions(
            DECISIONS[:1], "acme", MEETING_DATE, store=document_store, projects=registry
        )

        assert outcome.committed == 1
        assert len(document_store.files) == 1
        assert document_store.puts[1]["sha"] == "sha-1"

    def test_conflict_is_a_per_decision_failure(self, registry: ProjectRegistry) -> None:
        store = MagicMock()
        store.get.return_value = StoredDocument(body="old", sha="sha-stale")
        store.put.side_effect = [None, DocumentConflictError("changed"), None]

        outcome = commit_decisions(DECISIONS, "acme", MEETING_DATE, store=store, projects=registry)

        assert outcome.success is False
        assert outcome.committed == 2
        assert outcome.failed == 1
        assert outcome.errors[0].subject == DECISIONS[1].content
        assert "changed" in outcome.errors[0].reason
        assert store.put.call_count == 3

    def test_fetch_error_fails_only_that_decision(
        self, registry: ProjectRegistry, document_store: FakeDocumentStore
    ) -> None:
        bad_path = decision_path(DECISIONS[0], MEETING_DATE)
        document_store.fail_get[bad_path] = DocumentStoreError("GitHub GET returned 500")

        outcome = commit_decisions(
            DECISIONS, "acme", MEETING_DATE, store=document_store, projects=registry
        )

        assert outcome.committed == 2
        assert outcome.failed == 1
        assert bad_path not in document_store.files
        assert [p["path"] for p in document_store.puts] == [
            decision_path(d, MEETING_DATE) for d in DECISIONS[1:]
        ]

    @pytest.mark.parametrize("failures", [0, 1, 2, 3])
    def test_counts_always_add_up(self, registry: ProjectRegistry, failures: int) -> None:
        store = MagicMock()
        store.get.return_value = StoredDocument(body="", sha="s")
        store.put.side_effect = [RuntimeError("boom")] * failures + [None] * (3 - failures)

        outcome = commit_decisions(DECISIONS, "acme", MEETING_DATE, store=store, projects=registry)

        assert outcome.committed + outcome.failed == len(DECISIONS)
        assert outcome.failed == failures
        assert len(outcome.errors) == failures


class TestRenderDecisionMarkdown:
    def test_default_background(self) -> None:
        body = render_decision_markdown(Decision(content="Ship it"), MEETING_DATE)
        assert body.startswith("# Ship it\n")
        assert f"- Decided: {MEETING_DATE}" in body
        assert f"- Source: {MEETING_DATE} meeting" in body
        assert "(Decision based on the meeting discussion)" in body


# ---------------------------------------------------------------------------
# Task registration sink
# ---------------------------------------------------------------------------


class TestRegisterMeetingTasks:
    def test_registers_every_action(
        self, registry: ProjectRegistry, record_store: FakeRecordStore
    ) -> None:
        outcome = register_meeting_tasks(
            ACTIONS, "acme", MEETING_DATE, store=record_store, projects=registry
        )

        assert outcome.success is True
        assert outcome.registered == 2
        assert outcome.failed == 0
        first = record_store.created[0]
        assert first["base_id"] == "appACME"
        assert first["table"] == "tasks"
        assert first["fields"] == {
            "title": "Draft the schema",
            "assignee": "Alice",
            "status": "pending",
            "source": "meeting",
            "meeting_date": MEETING_DATE,
            "due_date": "2025-01-31",
        }

    def test_unparseable_deadline_omits_due_date(
        self, registry: ProjectRegistry, record_store: FakeRecordStore
    ) -> None:
        register_meeting_tasks(ACTIONS[1:], "acme", MEETING_DATE, store=record_store, projects=registry)
        fields = record_store.created[0]["fields"]
        assert "due_date" not in fields
        assert fields["assignee"] == "山田"

    def test_empty_batch_makes_no_calls(self, record_store: FakeRecordStore) -> None:
        projects = MagicMock()
        outcome = register_meeting_tasks([], "acme", MEETING_DATE, store=record_store, projects=projects)

        assert outcome.success is True
        assert outcome.registered == 0
        assert record_store.calls == 0
        projects.resolve_record_destination.assert_not_called()

    def test_unconfigured_project_fails_whole_batch(
        self, registry: ProjectRegistry, record_store: FakeRecordStore
    ) -> None:
        outcome = register_meeting_tasks(
            ACTIONS, "docs-only", MEETING_DATE, store=record_store, projects=registry
        )

        assert outcome.success is False
        assert outcome.registered == 0
        assert outcome.failed == 2
        assert outcome.error
        assert record_store.calls == 0

    def test_failure_is_isolated(self, registry: ProjectRegistry) -> None:
        store = FakeRecordStore(fail_on={1})
        outcome = register_meeting_tasks(ACTIONS, "acme", MEETING_DATE, store=store, projects=registry)

        assert outcome.success is False
        assert outcome.registered == 1
        assert outcome.failed == 1
        assert outcome.errors[0].subject == "Draft the schema"
        assert store.calls == 2

    def test_duplicate_submission_creates_duplicate_records(
        self, registry: ProjectRegistry, record_store: FakeRecordStore
    ) -> None:
        for _ in range(2):
            register_meeting_tasks(
                ACTIONS[:1], "acme", MEETING_DATE, store=record_store, projects=registry
            )
        assert len(record_store.created) == 2
        assert record_store.created[0]["fields"] == record_store.created[1]["fields"]


class TestBuildTaskFields:
    def test_relative_deadline(self) -> None:
        fields = build_task_fields(
            Action(task="t", assignee="a", deadline="来週"), MEETING_DATE, today=date(2025, 1, 15)
        )
        assert fields["due_date"] == "2025-01-22"
