from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.workforce_system.workforce_system.core.enums import DistributionCategory, Role, SessionState, TimeEntryStatus
from src.workforce_system.workforce_system.core.exceptions import (
    AuthorizationError,
    IncompleteDistributionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.workforce_system.workforce_system.deviations.service import DeviationService
from src.workforce_system.workforce_system.timesheets.model import TimeEntry, TimesheetSettings


def _entry(time_entry_id=1, *, clock_out=datetime(2026, 1, 5, 16, 45), status=TimeEntryStatus.PENDING):
    return TimeEntry(
        time_entry_id=time_entry_id,
        employee_id=2,
        work_date=date(2026, 1, 5),
        clock_in=datetime(2026, 1, 5, 8, 0),
        clock_out=clock_out,
        break_minutes=30,
        planned_start=time(8, 0),
        planned_end=time(16, 0),
        planned_break_minutes=30,
        status=status,
    )


class FakeTimeEntryRepo:
    def __init__(self, *entries):
        self._entries = {e.time_entry_id: e for e in entries}
        self.resolved = []

    def get_by_id(self, time_entry_id):
        return self._entries.get(int(time_entry_id))

    def list_for_employee(self, *, employee_id, start_date, end_date, status=None):
        return []

    def mark_resolved(self, *, time_entry_id, approved_by):
        self.resolved.append((time_entry_id, approved_by))
        return True


class FakeLedgerRepo:
    def __init__(self, *, fail_times=0):
        self._fail_times = fail_times
        self.commits = []

    def record_commit(self, *, result, handled_by):
        if self._fail_times > 0:
            self._fail_times -= 1
            raise PersistenceError("connection lost")
        self.commits.append((result, handled_by))
        return list(range(1, len(result.entries) + 1))

    def balance_minutes(self, *, employee_id, category):
        return sum(
            e.minutes
            for result, _ in self.commits
            for e in result.entries
            if e.employee_id == employee_id and e.category == category
        )

    def list_for_time_entry(self, *, time_entry_id):
        return []


def test_open_session_seeds_from_calculated_deviation():
    svc = DeviationService(FakeTimeEntryRepo(_entry()), FakeLedgerRepo())

    session, report = svc.open_session(current_role=Role.ADMIN, time_entry_id=1)

    assert session.total_deviation_minutes == 45
    assert session.buckets[DistributionCategory.TIME_BANK] == 45
    assert [d.deviation_type.value for d in report.details] == ["late_end"]


def test_staff_cannot_open_review():
    svc = DeviationService(FakeTimeEntryRepo(_entry()), FakeLedgerRepo())

    with pytest.raises(AuthorizationError):
        svc.open_session(current_role=Role.STAFF, time_entry_id=1)


def test_open_session_requires_pending_entry():
    svc = DeviationService(FakeTimeEntryRepo(_entry(status=TimeEntryStatus.APPROVED)), FakeLedgerRepo())

    with pytest.raises(ValidationError):
        svc.open_session(current_role=Role.ADMIN, time_entry_id=1)
    with pytest.raises(NotFoundError):
        svc.open_session(current_role=Role.ADMIN, time_entry_id=99)


def test_commit_hands_entries_to_ledger():
    ledger = FakeLedgerRepo()
    svc = DeviationService(FakeTimeEntryRepo(_entry()), ledger)
    session, _ = svc.open_session(current_role=Role.ADMIN, time_entry_id=1)
    session = svc.set_bucket(session, "overtime_50", 15)

    committed, result = svc.commit(current_role=Role.ADMIN, admin_user_id=1, session=session, notes="busy day")

    assert committed.state == SessionState.COMMITTED
    assert len(ledger.commits) == 1
    recorded, handled_by = ledger.commits[0]
    assert handled_by == 1
    assert [(e.category.value, e.minutes) for e in recorded.entries] == [("time_bank", 30), ("overtime_50", 15)]
    assert result is recorded
    assert svc.balance_for(employee_id=2, category="time_bank") == 30


def test_incomplete_distribution_never_reaches_ledger():
    ledger = FakeLedgerRepo()
    svc = DeviationService(FakeTimeEntryRepo(_entry()), ledger)
    session, _ = svc.open_session(current_role=Role.ADMIN, time_entry_id=1)
    session = svc.set_bucket(session, DistributionCategory.TIME_BANK, 40)

    with pytest.raises(IncompleteDistributionError):
        svc.commit(current_role=Role.ADMIN, admin_user_id=1, session=session)

    assert ledger.commits == []


def test_persistence_failure_propagates_and_session_can_be_retried():
    ledger = FakeLedgerRepo(fail_times=1)
    svc = DeviationService(FakeTimeEntryRepo(_entry()), ledger)
    session, _ = svc.open_session(current_role=Role.ADMIN, time_entry_id=1)

    with pytest.raises(PersistenceError):
        svc.commit(current_role=Role.ADMIN, admin_user_id=1, session=session)

    assert ledger.commits == []
    assert session.state == SessionState.INITIALIZED

    committed, _ = svc.commit(current_role=Role.ADMIN, admin_user_id=1, session=session)
    assert committed.state == SessionState.COMMITTED
    assert len(ledger.commits) == 1


def test_unknown_category_is_a_validation_error():
    svc = DeviationService(FakeTimeEntryRepo(_entry()), FakeLedgerRepo())
    session, _ = svc.open_session(current_role=Role.ADMIN, time_entry_id=1)

    with pytest.raises(ValidationError):
        svc.set_bucket(session, "vacation", 10)


def test_auto_approve_within_margin():
    entries = FakeTimeEntryRepo(_entry(1, clock_out=datetime(2026, 1, 5, 16, 3)), _entry(2))
    svc = DeviationService(
        entries,
        FakeLedgerRepo(),
        settings=TimesheetSettings(auto_approve_within_margin=True, margin_minutes=5),
    )

    assert svc.auto_approve_if_within_margin(time_entry_id=1) is True
    assert svc.auto_approve_if_within_margin(time_entry_id=2) is False
    assert entries.resolved == [(1, None)]


def test_auto_approve_disabled_by_default():
    entries = FakeTimeEntryRepo(_entry(1, clock_out=datetime(2026, 1, 5, 16, 0)))
    svc = DeviationService(entries, FakeLedgerRepo())

    assert svc.auto_approve_if_within_margin(time_entry_id=1) is False
    assert entries.resolved == []
