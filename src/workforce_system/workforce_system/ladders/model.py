from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import CompetenceLevel, SalaryType


@dataclass(frozen=True)
class LadderLevel:
    """One step of a wage ladder: ``[min_hours, max_hours)`` earns ``hourly_rate``."""

    level: int
    min_hours: float
    max_hours: Optional[float]
    hourly_rate: Decimal

    @property
    def is_terminal(self) -> bool:
        return self.max_hours is None

    def contains(self, hours: float) -> bool:
        if hours < self.min_hours:
            return False
        return self.max_hours is None or hours < self.max_hours


@dataclass(frozen=True)
class WageLadder:
    ladder_id: int
    name: str
    competence_level: CompetenceLevel
    levels: tuple[LadderLevel, ...] = ()

    def to_dict(self) -> dict:
        return {
            "ladder_id": self.ladder_id,
            "name": self.name,
            "competence_level": self.competence_level.value,
            "levels": [
                {
                    "level": lv.level,
                    "min_hours": lv.min_hours,
                    "max_hours": lv.max_hours,
                    "hourly_rate": str(lv.hourly_rate),
                }
                for lv in self.levels
            ],
        }


@dataclass(frozen=True)
class TenureProgress:
    """Computed position of an employee on a ladder (never stored)."""

    level: int
    hourly_rate: Decimal
    next_level: Optional[int] = None
    next_hourly_rate: Optional[Decimal] = None
    hours_to_next_level: Optional[float] = None

    @property
    def is_terminal(self) -> bool:
        return self.next_level is None

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "hourly_rate": str(self.hourly_rate),
            "next_level": self.next_level,
            "next_hourly_rate": str(self.next_hourly_rate) if self.next_hourly_rate is not None else None,
            "hours_to_next_level": self.hours_to_next_level,
        }


@dataclass(frozen=True)
class EmployeeLadderInfo:
    """Read-model: employee joined with wage ladder placement."""

    employee_id: int
    full_name: str
    salary_type: SalaryType
    wage_ladder_id: Optional[int]
    current_level: Optional[int]
    accumulated_hours: float
    contracted_hours_per_week: Optional[float] = None


@dataclass(frozen=True)
class LevelProgression:
    employee_id: int
    employee_name: str
    current_level: int
    new_level: int
    current_rate: Decimal
    new_rate: Decimal
    accumulated_hours: float
    wage_ladder_id: int
    wage_ladder_name: str

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "current_level": self.current_level,
            "new_level": self.new_level,
            "current_rate": str(self.current_rate),
            "new_rate": str(self.new_rate),
            "accumulated_hours": self.accumulated_hours,
            "wage_ladder_id": self.wage_ladder_id,
            "wage_ladder_name": self.wage_ladder_name,
        }


@dataclass(frozen=True)
class ProgressionBatch:
    """Outcome of applying several level changes; each update is its own write."""

    applied: tuple[LevelProgression, ...] = ()
    failed: tuple[LevelProgression, ...] = ()

    def to_dict(self) -> dict:
        return {
            "applied": [p.to_dict() for p in self.applied],
            "failed": [p.to_dict() for p in self.failed],
        }
