"""In-memory store of pending proposals keyed by Slack message handle."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from meeting_governance.proposals.models import Proposal

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60


class ProposalStore:
    """Ephemeral proposal map with lazy TTL eviction.

    Stale entries are swept only when a new proposal is inserted; there is no
    background timer. No locks are taken.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, Proposal] = {}

    def now(self) -> float:
        return self.clock()

    def put(self, handle: str, proposal: Proposal) -> None:
        """Store ``proposal`` under ``handle`` (overwriting) and purge stale entries."""
        self._entries[handle] = proposal
        purged = self.purge_expired(keep=handle)
        if purged:
            logger.info("Purged %d expired proposal(s)", purged)

    def get(self, handle: str) -> Proposal | None:
        return self._entries.get(handle)

    def pop(self, handle: str) -> Proposal | None:
        return self._entries.pop(handle, None)

    def purge_expired(self, keep: str | None = None) -> int:
        """Remove proposals older than the TTL, never touching ``keep``."""
        cutoff = self.now() - self.ttl_seconds
        expired = [
            handle
            for handle, proposal in list(self._entries.items())
            if handle != keep and proposal.created_at < cutoff
        ]
        for handle in expired:
            self._entries.pop(handle, None)
        return len(expired)

    def __contains__(self, handle: object) -> bool:
        return handle in self._entries

    def __len__(self) -> int:
        return len(self._entries)
