from datetime import date, datetime, time

import pytest

from src.workforce_system.workforce_system.core.enums import DeviationType
from src.workforce_system.workforce_system.core.exceptions import ValidationError
from src.workforce_system.workforce_system.timesheets.calculator.standard_calculator import (
    StandardDeviationCalculator,
    should_auto_approve,
)
from src.workforce_system.workforce_system.timesheets.model import TimeEntry, TimesheetSettings


def _entry(clock_in, clock_out, *, break_minutes=30, planned_start=time(8, 0), planned_end=time(16, 0)):
    return TimeEntry(
        time_entry_id=1,
        employee_id=1,
        work_date=date(2026, 1, 5),
        clock_in=clock_in,
        clock_out=clock_out,
        break_minutes=break_minutes,
        planned_start=planned_start,
        planned_end=planned_end,
        planned_break_minutes=30,
    )


def test_late_start_and_early_end_give_negative_total():
    calc = StandardDeviationCalculator()
    report = calc.calculate(_entry(datetime(2026, 1, 5, 8, 20), datetime(2026, 1, 5, 15, 50)))

    assert report.total_deviation_minutes == -30
    assert [(d.deviation_type, d.minutes) for d in report.details] == [
        (DeviationType.LATE_START, 20),
        (DeviationType.EARLY_END, 10),
    ]
    assert report.primary_type == DeviationType.LATE_START


def test_small_differences_inside_threshold_are_not_listed():
    calc = StandardDeviationCalculator()
    report = calc.calculate(_entry(datetime(2026, 1, 5, 7, 57), datetime(2026, 1, 5, 16, 4)))

    assert report.details == ()
    assert report.total_deviation_minutes == 7


def test_break_deviation_is_reported():
    calc = StandardDeviationCalculator()
    report = calc.calculate(_entry(datetime(2026, 1, 5, 8, 0), datetime(2026, 1, 5, 16, 0), break_minutes=50))

    assert report.total_deviation_minutes == -20
    assert report.details[0].deviation_type == DeviationType.EXTENDED_BREAK


def test_overnight_shift_wraps_to_next_day():
    calc = StandardDeviationCalculator()
    entry = _entry(
        datetime(2026, 1, 5, 22, 0),
        datetime(2026, 1, 6, 6, 30),
        planned_start=time(22, 0),
        planned_end=time(6, 0),
    )

    report = calc.calculate(entry)

    assert report.total_deviation_minutes == 30
    assert report.details[0].deviation_type == DeviationType.LATE_END


def test_open_entry_cannot_be_evaluated():
    calc = StandardDeviationCalculator()

    with pytest.raises(ValidationError):
        calc.calculate(_entry(datetime(2026, 1, 5, 8, 0), None))
    assert calc.worked_minutes(_entry(datetime(2026, 1, 5, 8, 0), None)) == 0


def test_worked_minutes_subtracts_break():
    calc = StandardDeviationCalculator()
    assert calc.worked_minutes(_entry(datetime(2026, 1, 5, 8, 0), datetime(2026, 1, 5, 17, 0), break_minutes=60)) == 8 * 60


def test_should_auto_approve_respects_settings():
    enabled = TimesheetSettings(auto_approve_within_margin=True, margin_minutes=5)

    assert should_auto_approve(-5, enabled) is True
    assert should_auto_approve(6, enabled) is False
    assert should_auto_approve(0, TimesheetSettings()) is False
    assert should_auto_approve(0, None) is False
