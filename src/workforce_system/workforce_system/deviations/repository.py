from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import DistributionCategory
from .model import CommitResult


class LedgerRepository(Protocol):
    def record_commit(self, *, result: CommitResult, handled_by: Optional[int]) -> Sequence[int]:
        """Persist the ledger entries and approve the originating time entry.

        Must be all-or-nothing; raises ``PersistenceError`` when the store
        rejects the write.
        """

        raise NotImplementedError

    def balance_minutes(self, *, employee_id: int, category: DistributionCategory) -> int:
        raise NotImplementedError

    def list_for_time_entry(self, *, time_entry_id: int) -> Sequence[dict]:
        """Return UI rows of handled deviations for one time entry."""

        raise NotImplementedError
