from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EmployeeLadderInfo, WageLadder


class LadderRepository(Protocol):
    def get_ladder(self, ladder_id: int) -> Optional[WageLadder]:
        """Return the ladder with its levels sorted by level number."""

        raise NotImplementedError

    def list_ladders(self) -> Sequence[WageLadder]:
        raise NotImplementedError

    def get_employee(self, employee_id: int) -> Optional[EmployeeLadderInfo]:
        raise NotImplementedError

    def list_hourly_employees_on_ladders(self, *, ladder_id: Optional[int] = None) -> Sequence[EmployeeLadderInfo]:
        raise NotImplementedError

    def set_current_level(self, *, employee_id: int, level: int) -> bool:
        raise NotImplementedError
