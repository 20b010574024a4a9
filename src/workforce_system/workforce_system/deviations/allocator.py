"""Interactive distribution of a timesheet deviation across compensation categories.

A session starts from a policy default, is rebalanced by the reviewer and is
committed exactly once. All functions are pure: they validate first and
return a new :class:`DistributionSession`, so a rejected call leaves the
caller's session untouched.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_int
from ..core.enums import BORROW_ORDER, DeviationType, DistributionCategory, SessionState
from ..core.exceptions import IncompleteDistributionError, OutOfRangeError, SessionCommittedError, ValidationError
from .model import CommitResult, DistributionSession, LedgerEntry

CATEGORY_LABELS = {
    DistributionCategory.TIME_BANK: "Time bank",
    DistributionCategory.OVERTIME_50: "Overtime 50%",
    DistributionCategory.OVERTIME_100: "Overtime 100%",
    DistributionCategory.COMP_TIME: "Comp time",
    DistributionCategory.IGNORE: "Ignored",
}


def _empty_buckets() -> dict[DistributionCategory, int]:
    return {c: 0 for c in DistributionCategory}


def _ensure_open(session: DistributionSession) -> None:
    if session.state == SessionState.COMMITTED:
        raise SessionCommittedError("Deviation has already been handled")


def start_session(
    time_entry_id: int,
    employee_id: int,
    total_deviation_minutes: int,
    *,
    deviation_type: Optional[DeviationType] = None,
) -> DistributionSession:
    """Seed a session: extra time goes to the time bank, missing time is ignored."""

    total = require_int(total_deviation_minutes, "Deviation minutes")
    buckets = _empty_buckets()
    default = DistributionCategory.TIME_BANK if total > 0 else DistributionCategory.IGNORE
    buckets[default] = abs(total)

    return DistributionSession(
        time_entry_id=int(time_entry_id),
        employee_id=int(employee_id),
        total_deviation_minutes=total,
        buckets=buckets,
        state=SessionState.INITIALIZED,
        deviation_type=deviation_type,
    )


def remaining(session: DistributionSession) -> int:
    return session.remaining


def is_fully_distributed(session: DistributionSession) -> bool:
    return session.remaining == 0


def set_bucket(session: DistributionSession, category: DistributionCategory, new_value: int) -> DistributionSession:
    """Set one bucket, borrowing from the others when slack runs out.

    Lowering a bucket leaves the freed minutes unassigned. Raising it uses
    unassigned minutes first, then drains the other buckets in
    ``BORROW_ORDER``.
    """

    _ensure_open(session)
    try:
        value = require_int(new_value, "Minutes")
    except ValidationError as e:
        raise OutOfRangeError(str(e)) from e
    if value < 0 or value > session.magnitude:
        raise OutOfRangeError(f"Minutes must be between 0 and {session.magnitude}")

    buckets = dict(session.buckets)
    delta = value - buckets[category]

    if delta > 0:
        shortfall = delta - session.remaining
        for other in BORROW_ORDER:
            if shortfall <= 0:
                break
            if other == category:
                continue
            take = min(buckets[other], shortfall)
            buckets[other] -= take
            shortfall -= take

    buckets[category] = value
    return replace(session, buckets=buckets, state=SessionState.EDITING)


def quick_assign_all(session: DistributionSession, category: DistributionCategory) -> DistributionSession:
    _ensure_open(session)
    buckets = _empty_buckets()
    buckets[category] = session.magnitude
    return replace(session, buckets=buckets, state=SessionState.EDITING)


def quick_assign_options(session: DistributionSession) -> list[DistributionCategory]:
    """Categories offered as one-click shortcuts; extra time is never ignored in one click."""

    if session.is_surplus:
        return [c for c in DistributionCategory if c != DistributionCategory.IGNORE]
    return list(DistributionCategory)


def _summary(session: DistributionSession, entries: list[LedgerEntry]) -> str:
    if not entries:
        return "No deviation to record"
    sign = "+" if session.is_surplus else "-"
    parts = ", ".join(f"{abs(e.minutes)} min {CATEGORY_LABELS[e.category]}" for e in entries)
    return f"{sign}{session.magnitude} min: {parts}"


def commit(
    session: DistributionSession,
    notes: Optional[str] = None,
    *,
    committed_at: Optional[datetime] = None,
) -> tuple[DistributionSession, CommitResult]:
    """Close the session and build its ledger entries.

    Entries carry signed minutes: a deficit produces negative amounts even
    though the buckets store magnitudes.
    """

    _ensure_open(session)
    if session.remaining > 0:
        raise IncompleteDistributionError(session.remaining)

    sign = 1 if session.is_surplus else -1
    deviation_type = session.deviation_type or (
        DeviationType.LATE_END if session.is_surplus else DeviationType.EARLY_END
    )
    description = "Extra time from timesheet" if session.is_surplus else "Missing time from timesheet"
    notes = (notes or "").strip() or None

    entries = [
        LedgerEntry(
            time_entry_id=session.time_entry_id,
            employee_id=session.employee_id,
            category=category,
            minutes=sign * session.buckets[category],
            description=f"{description} ({CATEGORY_LABELS[category]})",
            deviation_type=deviation_type,
            notes=notes,
        )
        for category in DistributionCategory
        if session.buckets[category] > 0
    ]

    result = CommitResult(
        time_entry_id=session.time_entry_id,
        entries=tuple(entries),
        summary=_summary(session, entries),
        committed_at=committed_at or now_local(),
        notes=notes,
    )
    return replace(session, state=SessionState.COMMITTED), result
