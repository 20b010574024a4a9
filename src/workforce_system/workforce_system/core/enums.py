from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for permission checks."""

    ADMIN = "admin"
    STAFF = "staff"


class DistributionCategory(str, Enum):
    """How a piece of deviation time is compensated.

    Declaration order is the display and ledger order.
    """

    TIME_BANK = "time_bank"
    OVERTIME_50 = "overtime_50"
    OVERTIME_100 = "overtime_100"
    COMP_TIME = "comp_time"
    IGNORE = "ignore"


# Order in which other buckets are drained when one bucket grows past the
# unallocated slack: uncompensated time first, the time bank last.
BORROW_ORDER: tuple[DistributionCategory, ...] = (
    DistributionCategory.IGNORE,
    DistributionCategory.COMP_TIME,
    DistributionCategory.OVERTIME_100,
    DistributionCategory.OVERTIME_50,
    DistributionCategory.TIME_BANK,
)


class SessionState(str, Enum):
    INITIALIZED = "INITIALIZED"
    EDITING = "EDITING"
    COMMITTED = "COMMITTED"


class DeviationType(str, Enum):
    EARLY_START = "early_start"
    LATE_START = "late_start"
    EARLY_END = "early_end"
    LATE_END = "late_end"
    EXTENDED_BREAK = "extended_break"
    SHORT_BREAK = "short_break"


class TimeEntryStatus(str, Enum):
    """Approval state of a time entry."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class CompetenceLevel(str, Enum):
    UNSKILLED = "unskilled"
    SKILLED = "skilled"
    APPRENTICE = "apprentice"


class SalaryType(str, Enum):
    HOURLY = "hourly"
    FIXED = "fixed"
