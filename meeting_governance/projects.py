"""Project configuration: where each project's decisions and tasks are written.

Projects are listed in a YAML file (``config.yml`` by default)::

    projects:
      - id: acme
        name: ACME Portal
        github:
          owner: acme-inc
          repo: acme-portal
          branch: main
        airtable:
          base_id: appXXXXXXXX
          base_name: ACME Tasks
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, Field, ValidationError

from meeting_governance.config import settings
from meeting_governance.errors import ProjectConfigError

logger = logging.getLogger(__name__)


class DocumentDestination(BaseModel):
    """GitHub repository that receives decision documents."""

    owner: str
    repo: str
    branch: str = "main"


class RecordDestination(BaseModel):
    """Task-tracking base that receives action records."""

    base_id: str
    base_name: str | None = None


class Project(BaseModel):
    id: str
    name: str | None = None
    github: DocumentDestination | None = None
    records: RecordDestination | None = Field(
        default=None, validation_alias=AliasChoices("records", "airtable")
    )


class ProjectsFile(BaseModel):
    projects: list[Project] = []


class ProjectRegistry:
    """Resolves a project id to its document and record destinations."""

    def __init__(self, projects: list[Project] | None = None) -> None:
        self._projects = {p.id: p for p in projects or []}

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> ProjectRegistry:
        try:
            parsed = ProjectsFile.model_validate(data or {})
        except ValidationError as exc:
            raise ProjectConfigError(f"Invalid project configuration: {exc}") from exc
        return cls(parsed.projects)

    @classmethod
    def from_file(cls, path: str | Path) -> ProjectRegistry:
        """Load projects from a YAML file; a missing file means no projects."""
        path = Path(path)
        if not path.exists():
            logger.warning("Project config %s not found; no destinations configured", path)
            return cls()
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ProjectConfigError(f"Cannot read project configuration {path}: {exc}") from exc
        return cls.from_mapping(data)

    def get(self, project_id: str) -> Project | None:
        return self._projects.get(project_id)

    def resolve_document_destination(self, project_id: str) -> DocumentDestination | None:
        project = self.get(project_id)
        return project.github if project else None

    def resolve_record_destination(self, project_id: str) -> RecordDestination | None:
        project = self.get(project_id)
        return project.records if project else None


@lru_cache(maxsize=1)
def get_project_registry() -> ProjectRegistry:
    """Return the cached registry for ``PROJECTS_CONFIG_PATH`` (or settings)."""
    path = os.getenv("PROJECTS_CONFIG_PATH") or settings.projects_config_path
    return ProjectRegistry.from_file(path)


def clear_project_cache() -> None:
    """Forget the cached registry so the next lookup re-reads the file."""
    get_project_registry.cache_clear()
