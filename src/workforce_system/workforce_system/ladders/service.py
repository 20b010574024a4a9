from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_CONTRACTED_HOURS_PER_WEEK
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, InvalidLadderError, NotFoundError, ValidationError
from .model import EmployeeLadderInfo, LevelProgression, ProgressionBatch, TenureProgress, WageLadder
from .repository import LadderRepository
from .resolver import estimate_time_to_next_level, progress_percentage, resolve_level

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeniorityOverview:
    employee_id: int
    ladder_name: str
    accumulated_hours: float
    progress: TenureProgress
    percentage: float
    time_estimate: Optional[str]
    total_levels: int

    def to_dict(self) -> dict:
        data = self.progress.to_dict()
        data.update(
            {
                "employee_id": self.employee_id,
                "ladder_name": self.ladder_name,
                "accumulated_hours": self.accumulated_hours,
                "percentage": round(self.percentage, 1),
                "time_estimate": self.time_estimate,
                "total_levels": self.total_levels,
            }
        )
        return data


class LadderService:
    def __init__(self, ladders: LadderRepository):
        self._ladders = ladders

    def _ladder_for(self, employee: EmployeeLadderInfo) -> WageLadder:
        if employee.wage_ladder_id is None:
            raise ValidationError("Employee has no wage ladder")
        ladder = self._ladders.get_ladder(employee.wage_ladder_id)
        if not ladder:
            raise NotFoundError("Wage ladder does not exist")
        return ladder

    def list_ladders(self) -> list[WageLadder]:
        return list(self._ladders.list_ladders())

    def progress_for(self, employee_id: int) -> SeniorityOverview:
        employee = self._ladders.get_employee(int(employee_id))
        if not employee:
            raise NotFoundError("Employee does not exist")

        ladder = self._ladder_for(employee)
        hours = employee.accumulated_hours
        progress = resolve_level(ladder.levels, hours)
        weekly = employee.contracted_hours_per_week or DEFAULT_CONTRACTED_HOURS_PER_WEEK

        return SeniorityOverview(
            employee_id=employee.employee_id,
            ladder_name=ladder.name,
            accumulated_hours=hours,
            progress=progress,
            percentage=progress_percentage(ladder.levels, hours),
            time_estimate=estimate_time_to_next_level(progress, weekly),
            total_levels=len(ladder.levels),
        )

    def check_level_progressions(self) -> list[LevelProgression]:
        """Employees whose accumulated hours entitle them to a higher level."""

        ladders: dict[int, WageLadder] = {}
        out: list[LevelProgression] = []

        for emp in self._ladders.list_hourly_employees_on_ladders():
            ladder = ladders.get(emp.wage_ladder_id)
            if ladder is None:
                ladder = self._ladders.get_ladder(emp.wage_ladder_id)
                if not ladder:
                    continue
                ladders[emp.wage_ladder_id] = ladder
            if not ladder.levels:
                continue

            current_level = emp.current_level or 1
            calculated = resolve_level(ladder.levels, emp.accumulated_hours)
            if calculated.level <= current_level:
                continue

            current_rate = next(
                (lv.hourly_rate for lv in ladder.levels if lv.level == current_level),
                Decimal("0"),
            )
            out.append(
                LevelProgression(
                    employee_id=emp.employee_id,
                    employee_name=emp.full_name,
                    current_level=current_level,
                    new_level=calculated.level,
                    current_rate=current_rate,
                    new_rate=calculated.hourly_rate,
                    accumulated_hours=emp.accumulated_hours,
                    wage_ladder_id=ladder.ladder_id,
                    wage_ladder_name=ladder.name,
                )
            )

        return out

    def apply_progression(self, *, current_role: Role, employee_id: int, new_level: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change wage levels")

        employee = self._ladders.get_employee(int(employee_id))
        if not employee:
            raise NotFoundError("Employee does not exist")

        ladder = self._ladder_for(employee)
        if not ladder.levels:
            raise InvalidLadderError("Wage ladder has no levels")
        if int(new_level) not in {lv.level for lv in ladder.levels}:
            raise ValidationError(f"Level {new_level} does not exist on ladder {ladder.name}")

        if not self._ladders.set_current_level(employee_id=employee.employee_id, level=int(new_level)):
            raise ValidationError("Updating wage level failed")

        logger.info(
            "Employee %s moved from level %s to %s on ladder %s",
            employee.employee_id,
            employee.current_level,
            new_level,
            ladder.ladder_id,
        )

    def apply_all_progressions(self, *, current_role: Role) -> ProgressionBatch:
        """Apply every pending progression, reporting which updates succeeded.

        Updates are independent; one failing does not undo the others.
        """

        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change wage levels")

        applied: list[LevelProgression] = []
        failed: list[LevelProgression] = []
        for p in self.check_level_progressions():
            if self._ladders.set_current_level(employee_id=p.employee_id, level=p.new_level):
                applied.append(p)
            else:
                failed.append(p)

        logger.info("Applied %d level progressions", len(applied))
        if failed:
            logger.warning(
                "Level update failed for employees %s",
                ", ".join(str(p.employee_id) for p in failed),
            )
        return ProgressionBatch(applied=tuple(applied), failed=tuple(failed))
