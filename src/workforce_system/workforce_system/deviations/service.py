from __future__ import annotations

import logging
from typing import Optional, Union

from ..core.enums import DistributionCategory, Role, TimeEntryStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..timesheets.calculator.base import DeviationCalculator
from ..timesheets.calculator.standard_calculator import StandardDeviationCalculator, should_auto_approve
from ..timesheets.model import DeviationReport, TimesheetSettings
from ..timesheets.repository import TimeEntryRepository
from . import allocator
from .model import CommitResult, DistributionSession
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


class DeviationService:
    """Deviation review workflow around the pure allocator.

    Sessions are passed in and returned, never stored here; persistence
    happens only in :meth:`commit`.
    """

    def __init__(
        self,
        time_entries: TimeEntryRepository,
        ledger: LedgerRepository,
        *,
        calculator: Optional[DeviationCalculator] = None,
        settings: Optional[TimesheetSettings] = None,
    ):
        self._time_entries = time_entries
        self._ledger = ledger
        self._calculator = calculator or StandardDeviationCalculator()
        self._settings = settings or TimesheetSettings()

    @staticmethod
    def parse_category(value: Union[str, DistributionCategory]) -> DistributionCategory:
        try:
            return DistributionCategory(value)
        except ValueError:
            raise ValidationError(f"Unknown category: {value!r}")

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can handle deviations")

    def _pending_entry(self, time_entry_id: int):
        entry = self._time_entries.get_by_id(int(time_entry_id))
        if not entry:
            raise NotFoundError("Time entry does not exist")
        if entry.status != TimeEntryStatus.PENDING:
            raise ValidationError("Time entry has already been handled")
        return entry

    def open_session(self, *, current_role: Role, time_entry_id: int) -> tuple[DistributionSession, DeviationReport]:
        self._require_admin(current_role)

        entry = self._pending_entry(time_entry_id)
        report = self._calculator.calculate(entry)
        session = allocator.start_session(
            entry.time_entry_id,
            entry.employee_id,
            report.total_deviation_minutes,
            deviation_type=report.primary_type,
        )
        return session, report

    def set_bucket(
        self,
        session: DistributionSession,
        category: Union[str, DistributionCategory],
        minutes: int,
    ) -> DistributionSession:
        return allocator.set_bucket(session, self.parse_category(category), minutes)

    def quick_assign(self, session: DistributionSession, category: Union[str, DistributionCategory]) -> DistributionSession:
        return allocator.quick_assign_all(session, self.parse_category(category))

    def commit(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        session: DistributionSession,
        notes: Optional[str] = None,
    ) -> tuple[DistributionSession, CommitResult]:
        """Validate, persist and close ``session``.

        Persistence errors propagate unchanged and nothing is retried; the
        caller's session is still open, so the commit can be attempted again.
        """

        self._require_admin(current_role)

        committed, result = allocator.commit(session, notes)
        self._ledger.record_commit(result=result, handled_by=int(admin_user_id))

        logger.info(
            "Deviation for time entry %s handled by %s: %s",
            result.time_entry_id,
            admin_user_id,
            result.summary,
        )
        return committed, result

    def auto_approve_if_within_margin(self, *, time_entry_id: int) -> bool:
        """Approve an entry without review when its deviation is inside the margin."""

        entry = self._pending_entry(time_entry_id)
        report = self._calculator.calculate(entry)
        if not should_auto_approve(report.total_deviation_minutes, self._settings):
            return False

        if not self._time_entries.mark_resolved(time_entry_id=entry.time_entry_id, approved_by=None):
            raise ValidationError("Approving the time entry failed")
        logger.info(
            "Time entry %s auto-approved (deviation %+d min)",
            entry.time_entry_id,
            report.total_deviation_minutes,
        )
        return True

    def history_for(self, *, time_entry_id: int) -> list[dict]:
        """Ledger rows already recorded for a time entry."""

        return list(self._ledger.list_for_time_entry(time_entry_id=int(time_entry_id)))

    def balance_for(self, *, employee_id: int, category: Union[str, DistributionCategory]) -> int:
        return self._ledger.balance_minutes(employee_id=int(employee_id), category=self.parse_category(category))
