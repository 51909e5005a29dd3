"""Result types shared by the decision and task sinks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CommitError:
    """One item that could not be persisted."""

    subject: str  # decision content or action task
    reason: str


@dataclass
class CommitOutcome:
    """Aggregated result of persisting one batch.

    ``error`` is set only for whole-batch failures (unresolved project
    configuration), in which case nothing was attempted.
    """

    success: bool = True
    committed: int = 0
    failed: int = 0
    errors: list[CommitError] = field(default_factory=list)
    error: str | None = None

    @property
    def registered(self) -> int:
        """Alias used by the task sink."""
        return self.committed

    @classmethod
    def unconfigured(cls, batch_size: int, message: str) -> CommitOutcome:
        return cls(success=False, committed=0, failed=batch_size, error=message)

    def record_success(self) -> None:
        self.committed += 1

    def record_failure(self, subject: str, reason: str) -> None:
        self.failed += 1
        self.success = False
        self.errors.append(CommitError(subject=subject, reason=reason))

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "committed": self.committed,
            "failed": self.failed,
            "errors": [{"subject": e.subject, "reason": e.reason} for e in self.errors],
            "error": self.error,
        }
