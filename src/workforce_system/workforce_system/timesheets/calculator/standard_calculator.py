from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...common.datetime_utils import minutes_between
from ...core.constants import DEFAULT_DEVIATION_THRESHOLD_MINUTES
from ...core.enums import DeviationType
from ...core.exceptions import ValidationError
from ..model import DeviationDetail, DeviationReport, TimeEntry, TimesheetSettings
from .base import DeviationCalculator


def should_auto_approve(deviation_minutes: int, settings: Optional[TimesheetSettings]) -> bool:
    if not settings or not settings.auto_approve_within_margin:
        return False
    return abs(deviation_minutes) <= settings.margin_minutes


class StandardDeviationCalculator(DeviationCalculator):
    """Standard rule: actual (out - in - break) against planned (end - start - planned break).

    Start, end and break differences beyond the threshold are reported
    individually; the total is the rounded difference in worked minutes.
    """

    def __init__(self, *, threshold_minutes: int = DEFAULT_DEVIATION_THRESHOLD_MINUTES):
        self._threshold = int(threshold_minutes)

    def worked_minutes(self, entry: TimeEntry) -> int:
        if not entry.clock_out:
            return 0
        minutes = int(minutes_between(entry.clock_in, entry.clock_out))
        minutes -= int(entry.break_minutes or 0)
        return max(minutes, 0)

    def _planned_window(self, entry: TimeEntry) -> tuple[datetime, datetime]:
        start = datetime.combine(entry.work_date, entry.planned_start)
        end = datetime.combine(entry.work_date, entry.planned_end)
        if end < start:
            end += timedelta(days=1)
        return start, end

    def calculate(self, entry: TimeEntry) -> DeviationReport:
        if not entry.clock_out:
            raise ValidationError("Time entry has no clock-out yet")
        if entry.planned_start is None or entry.planned_end is None:
            raise ValidationError("Time entry has no planned shift to compare against")

        planned_start, planned_end = self._planned_window(entry)
        t = self._threshold
        details: list[DeviationDetail] = []

        start_diff = round(minutes_between(planned_start, entry.clock_in))
        if start_diff < -t:
            details.append(DeviationDetail(DeviationType.EARLY_START, -start_diff, f"Started {-start_diff} min early"))
        elif start_diff > t:
            details.append(DeviationDetail(DeviationType.LATE_START, start_diff, f"Started {start_diff} min late"))

        end_diff = round(minutes_between(planned_end, entry.clock_out))
        if end_diff > t:
            details.append(DeviationDetail(DeviationType.LATE_END, end_diff, f"Ended {end_diff} min late"))
        elif end_diff < -t:
            details.append(DeviationDetail(DeviationType.EARLY_END, -end_diff, f"Ended {-end_diff} min early"))

        break_diff = int(entry.break_minutes or 0) - int(entry.planned_break_minutes or 0)
        if break_diff > t:
            details.append(DeviationDetail(DeviationType.EXTENDED_BREAK, break_diff, f"{break_diff} min extra break"))
        elif break_diff < -t:
            details.append(DeviationDetail(DeviationType.SHORT_BREAK, -break_diff, f"{-break_diff} min shorter break"))

        actual = minutes_between(entry.clock_in, entry.clock_out) - int(entry.break_minutes or 0)
        planned = minutes_between(planned_start, planned_end) - int(entry.planned_break_minutes or 0)
        return DeviationReport(total_deviation_minutes=round(actual - planned), details=tuple(details))
