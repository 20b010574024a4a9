from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.enums import TimeEntryStatus
from ..core.exceptions import ValidationError
from ..ladders.repository import LadderRepository
from ..timesheets.calculator.base import DeviationCalculator
from ..timesheets.calculator.standard_calculator import StandardDeviationCalculator
from ..timesheets.repository import TimeEntryRepository
from .model import BackPayCalculation

_CENTS = Decimal("0.01")


class BackPayService:
    """Retroactive pay when a ladder level's rate changes with a past effective date."""

    def __init__(
        self,
        ladders: LadderRepository,
        time_entries: TimeEntryRepository,
        *,
        calculator: Optional[DeviationCalculator] = None,
    ):
        self._ladders = ladders
        self._time_entries = time_entries
        self._calculator = calculator or StandardDeviationCalculator()

    def calculate_for_ladder_change(
        self,
        *,
        ladder_id: int,
        level: int,
        old_rate: Decimal,
        new_rate: Decimal,
        effective_from: date,
        today: date,
    ) -> list[BackPayCalculation]:
        # Only changes that took effect in the past owe anything.
        if effective_from >= today:
            return []

        old_rate = Decimal(str(old_rate))
        new_rate = Decimal(str(new_rate))
        if old_rate < 0 or new_rate < 0:
            raise ValidationError("Rates must be >= 0")
        difference = new_rate - old_rate

        out: list[BackPayCalculation] = []
        for emp in self._ladders.list_hourly_employees_on_ladders(ladder_id=int(ladder_id)):
            if emp.current_level != int(level):
                continue

            entries = self._time_entries.list_for_employee(
                employee_id=emp.employee_id,
                start_date=effective_from,
                end_date=today,
                status=TimeEntryStatus.APPROVED,
            )
            minutes = sum(self._calculator.worked_minutes(e) for e in entries)
            if minutes <= 0:
                continue

            hours = (Decimal(minutes) / Decimal(60)).quantize(_CENTS, rounding=ROUND_HALF_UP)
            out.append(
                BackPayCalculation(
                    employee_id=emp.employee_id,
                    employee_name=emp.full_name,
                    total_hours=hours,
                    old_rate=old_rate,
                    new_rate=new_rate,
                    difference_per_hour=difference,
                    total_adjustment=(Decimal(minutes) / Decimal(60) * difference).quantize(
                        _CENTS, rounding=ROUND_HALF_UP
                    ),
                )
            )

        return out
