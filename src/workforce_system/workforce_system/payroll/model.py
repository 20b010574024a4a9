from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class BackPayCalculation:
    employee_id: int
    employee_name: str
    total_hours: Decimal
    old_rate: Decimal
    new_rate: Decimal
    difference_per_hour: Decimal
    total_adjustment: Decimal

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "total_hours": str(self.total_hours),
            "old_rate": str(self.old_rate),
            "new_rate": str(self.new_rate),
            "difference_per_hour": str(self.difference_per_hour),
            "total_adjustment": str(self.total_adjustment),
        }
