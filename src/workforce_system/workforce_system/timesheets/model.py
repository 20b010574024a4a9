from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.constants import DEFAULT_DEVIATION_THRESHOLD_MINUTES, DEFAULT_MARGIN_MINUTES
from ..core.enums import DeviationType, TimeEntryStatus


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one clocked work period compared against its plan."""

    time_entry_id: int
    employee_id: int
    work_date: date
    clock_in: datetime
    clock_out: Optional[datetime]
    break_minutes: int
    planned_start: Optional[time]
    planned_end: Optional[time]
    planned_break_minutes: int = 0
    status: TimeEntryStatus = TimeEntryStatus.PENDING


@dataclass(frozen=True)
class DeviationDetail:
    deviation_type: DeviationType
    minutes: int
    label: str

    def to_dict(self) -> dict:
        return {"type": self.deviation_type.value, "minutes": self.minutes, "label": self.label}


@dataclass(frozen=True)
class DeviationReport:
    """Signed total (positive = extra time) plus the individual deviations."""

    total_deviation_minutes: int
    details: tuple[DeviationDetail, ...] = ()

    @property
    def primary_type(self) -> Optional[DeviationType]:
        if not self.details:
            return None
        return max(self.details, key=lambda d: d.minutes).deviation_type


@dataclass(frozen=True)
class TimesheetSettings:
    auto_approve_within_margin: bool = False
    margin_minutes: int = DEFAULT_MARGIN_MINUTES
    threshold_minutes: int = DEFAULT_DEVIATION_THRESHOLD_MINUTES
