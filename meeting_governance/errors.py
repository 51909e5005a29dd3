"""Exception types raised by the external collaborators (stores, Slack, config)."""

from __future__ import annotations


class MeetingGovernanceError(Exception):
    """Base class for collaborator failures."""


class ProjectConfigError(MeetingGovernanceError):
    """The project configuration file exists but cannot be read or validated."""


class DocumentStoreError(MeetingGovernanceError):
    """Any document-store failure other than not-found or a version conflict."""


class DocumentNotFoundError(DocumentStoreError):
    """The requested document has no existing version."""


class DocumentConflictError(DocumentStoreError):
    """A conditional write was rejected because the version token is stale."""


class RecordStoreError(MeetingGovernanceError):
    """A record could not be created in the task-tracking store."""


class PresentationError(MeetingGovernanceError):
    """Slack rejected a post or update."""
