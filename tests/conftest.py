"""Shared fixtures: in-memory collaborators so no test touches GitHub, Slack or Supabase."""

from __future__ import annotations

from typing import Any

import pytest

from meeting_governance.projects import ProjectRegistry
from tests.fakes import FakeDocumentStore, FakeRecordStore

PROJECTS_CONFIG: dict[str, Any] = {
    "projects": [
        {
            "id": "acme",
            "name": "ACME Portal",
            "github": {"owner": "acme-inc", "repo": "acme-portal"},
            "airtable": {"base_id": "appACME", "base_name": "ACME Tasks"},
        },
        {"id": "docs-only", "github": {"owner": "acme-inc", "repo": "handbook", "branch": "docs"}},
        {"id": "tasks-only", "records": {"base_id": "appTASKS"}},
    ]
}


@pytest.fixture
def registry() -> ProjectRegistry:
    return ProjectRegistry.from_mapping(PROJECTS_CONFIG)


@pytest.fixture
def document_store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def record_store() -> FakeRecordStore:
    return FakeRecordStore()
