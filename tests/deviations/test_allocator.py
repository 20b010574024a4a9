from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from src.workforce_system.workforce_system.core.enums import (
    DeviationType,
    DistributionCategory as C,
    SessionState,
)
from src.workforce_system.workforce_system.core.exceptions import (
    IncompleteDistributionError,
    OutOfRangeError,
    SessionCommittedError,
    ValidationError,
)
from src.workforce_system.workforce_system.deviations import allocator
from src.workforce_system.workforce_system.deviations.model import DistributionSession


def _buckets(session):
    return {c: v for c, v in session.buckets.items() if v}


def test_positive_deviation_defaults_to_time_bank_and_commits_one_entry():
    session = allocator.start_session(time_entry_id=7, employee_id=2, total_deviation_minutes=45)

    assert _buckets(session) == {C.TIME_BANK: 45}
    assert session.state == SessionState.INITIALIZED
    assert allocator.is_fully_distributed(session)

    committed, result = allocator.commit(session, committed_at=datetime(2026, 1, 5, 17, 0))

    assert committed.state == SessionState.COMMITTED
    assert len(result.entries) == 1
    entry = result.entries[0]
    assert entry.category == C.TIME_BANK
    assert entry.minutes == 45
    assert entry.hours == 0.75
    assert entry.time_entry_id == 7
    assert result.summary == "+45 min: 45 min Time bank"


def test_negative_deviation_rebalanced_into_two_signed_entries():
    session = allocator.start_session(time_entry_id=8, employee_id=2, total_deviation_minutes=-30)
    assert _buckets(session) == {C.IGNORE: 30}

    session = allocator.set_bucket(session, C.IGNORE, 10)
    assert allocator.remaining(session) == 20
    assert not allocator.is_fully_distributed(session)

    session = allocator.set_bucket(session, C.OVERTIME_50, 20)
    assert _buckets(session) == {C.IGNORE: 10, C.OVERTIME_50: 20}
    assert allocator.remaining(session) == 0

    _, result = allocator.commit(session, "  left early  ")

    assert [(e.category, e.minutes) for e in result.entries] == [(C.OVERTIME_50, -20), (C.IGNORE, -10)]
    assert all(e.notes == "left early" for e in result.entries)
    assert all(e.deviation_type == DeviationType.EARLY_END for e in result.entries)
    assert result.summary.startswith("-30 min")


def test_raising_a_bucket_drains_others_when_no_slack_left():
    session = allocator.quick_assign_all(
        allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=10), C.TIME_BANK
    )

    session = allocator.set_bucket(session, C.OVERTIME_50, 10)

    assert _buckets(session) == {C.OVERTIME_50: 10}
    assert allocator.remaining(session) == 0


def test_borrowing_uses_slack_first_then_declared_borrow_order():
    session = allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=60)
    session = allocator.set_bucket(session, C.TIME_BANK, 20)
    session = allocator.set_bucket(session, C.COMP_TIME, 15)
    session = allocator.set_bucket(session, C.IGNORE, 15)
    assert allocator.remaining(session) == 10

    # 10 from slack, then 15 from IGNORE, then 5 from COMP_TIME; TIME_BANK untouched.
    session = allocator.set_bucket(session, C.OVERTIME_100, 30)

    assert _buckets(session) == {C.TIME_BANK: 20, C.COMP_TIME: 10, C.OVERTIME_100: 30}


def test_lowering_a_bucket_leaves_minutes_unassigned():
    session = allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=90)

    session = allocator.set_bucket(session, C.TIME_BANK, 30)

    assert _buckets(session) == {C.TIME_BANK: 30}
    assert allocator.remaining(session) == 60
    assert session.state == SessionState.EDITING


def test_buckets_never_exceed_magnitude_or_go_negative():
    session = allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=-50)
    moves = [
        (C.TIME_BANK, 50),
        (C.OVERTIME_50, 25),
        (C.IGNORE, 0),
        (C.COMP_TIME, 40),
        (C.OVERTIME_100, 50),
        (C.TIME_BANK, 5),
        (C.OVERTIME_50, 45),
    ]
    for category, value in moves:
        session = allocator.set_bucket(session, category, value)
        assert session.buckets[category] == value
        assert all(v >= 0 for v in session.buckets.values())
        assert sum(session.buckets.values()) <= 50
        assert allocator.remaining(session) >= 0


@pytest.mark.parametrize(
    "value",
    [-1, 31, 2.5, "ten", None, True, float("inf"), float("nan"), Decimal("12.5"), Decimal("Infinity")],
)
def test_out_of_range_values_are_rejected_without_change(value):
    session = allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=30)

    with pytest.raises(OutOfRangeError):
        allocator.set_bucket(session, C.OVERTIME_50, value)

    assert _buckets(session) == {C.TIME_BANK: 30}


def test_commit_blocked_while_minutes_unassigned():
    session = allocator.set_bucket(
        allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=42), C.TIME_BANK, 30
    )

    with pytest.raises(IncompleteDistributionError) as exc:
        allocator.commit(session)

    assert exc.value.remaining_minutes == 12
    assert str(exc.value) == "12 minutes still unassigned"


def test_committed_session_is_terminal():
    session = allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=15)
    committed, _ = allocator.commit(session)

    with pytest.raises(SessionCommittedError):
        allocator.commit(committed)
    with pytest.raises(SessionCommittedError):
        allocator.set_bucket(committed, C.TIME_BANK, 5)
    with pytest.raises(SessionCommittedError):
        allocator.quick_assign_all(committed, C.IGNORE)


def test_quick_assign_moves_everything_to_one_category():
    session = allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=60)
    session = allocator.set_bucket(session, C.OVERTIME_50, 20)

    session = allocator.quick_assign_all(session, C.COMP_TIME)

    assert _buckets(session) == {C.COMP_TIME: 60}
    assert allocator.is_fully_distributed(session)


def test_quick_assign_options_hide_ignore_for_extra_time():
    surplus = allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=20)
    deficit = allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=-20)

    assert C.IGNORE not in allocator.quick_assign_options(surplus)
    assert allocator.quick_assign_options(deficit) == list(C)


def test_zero_deviation_commits_without_entries():
    session = allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=0)

    _, result = allocator.commit(session)

    assert result.entries == ()
    assert result.summary == "No deviation to record"


def test_session_survives_dict_round_trip_and_rejects_tampering():
    session = allocator.set_bucket(
        allocator.start_session(
            time_entry_id=3, employee_id=4, total_deviation_minutes=25, deviation_type=DeviationType.LATE_END
        ),
        C.OVERTIME_50,
        10,
    )

    data = session.to_dict()
    assert data["remaining"] == 0
    assert DistributionSession.from_dict(data) == session

    data["buckets"]["ignore"] = 99
    with pytest.raises(ValidationError):
        DistributionSession.from_dict(data)


def test_sessions_do_not_share_or_expose_mutable_buckets():
    editing = allocator.set_bucket(
        allocator.start_session(time_entry_id=1, employee_id=1, total_deviation_minutes=30), C.COMP_TIME, 30
    )
    committed, _ = allocator.commit(editing)

    with pytest.raises(TypeError):
        committed.buckets[C.TIME_BANK] = 99

    assert committed.buckets is not editing.buckets
    assert committed.buckets == editing.buckets
    assert hash(editing) == hash(allocator.set_bucket(editing, C.COMP_TIME, 30))
