from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import TimeEntryStatus
from .model import TimeEntry


class TimeEntryRepository(Protocol):
    def get_by_id(self, time_entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def list_for_employee(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        status: Optional[TimeEntryStatus] = None,
    ) -> Sequence[TimeEntry]:
        raise NotImplementedError

    def mark_resolved(self, *, time_entry_id: int, approved_by: Optional[int]) -> bool:
        """Set the entry APPROVED once its deviation has been handled."""

        raise NotImplementedError
