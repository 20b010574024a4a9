from __future__ import annotations

from decimal import Decimal

import pytest

from src.workforce_system.workforce_system.core.enums import CompetenceLevel, Role, SalaryType
from src.workforce_system.workforce_system.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.workforce_system.workforce_system.ladders.model import EmployeeLadderInfo, LadderLevel, WageLadder
from src.workforce_system.workforce_system.ladders.service import LadderService


def _ladder():
    return WageLadder(
        ladder_id=1,
        name="Warehouse",
        competence_level=CompetenceLevel.UNSKILLED,
        levels=(
            LadderLevel(level=1, min_hours=0, max_hours=500, hourly_rate=Decimal("200")),
            LadderLevel(level=2, min_hours=500, max_hours=1000, hourly_rate=Decimal("210")),
            LadderLevel(level=3, min_hours=1000, max_hours=None, hourly_rate=Decimal("225")),
        ),
    )


def _employee(employee_id, hours, level, ladder_id=1):
    return EmployeeLadderInfo(
        employee_id=employee_id,
        full_name=f"Employee {employee_id}",
        salary_type=SalaryType.HOURLY,
        wage_ladder_id=ladder_id,
        current_level=level,
        accumulated_hours=hours,
        contracted_hours_per_week=37.5,
    )


class FakeLadderRepo:
    def __init__(self, employees, ladders=None):
        self._employees = {e.employee_id: e for e in employees}
        self._ladders = {l.ladder_id: l for l in (ladders or [_ladder()])}
        self.level_updates = []
        self.failing = set()

    def get_ladder(self, ladder_id):
        return self._ladders.get(ladder_id)

    def list_ladders(self):
        return list(self._ladders.values())

    def get_employee(self, employee_id):
        return self._employees.get(employee_id)

    def list_hourly_employees_on_ladders(self, *, ladder_id=None):
        return [e for e in self._employees.values() if ladder_id is None or e.wage_ladder_id == ladder_id]

    def set_current_level(self, *, employee_id, level):
        self.level_updates.append((employee_id, level))
        return employee_id in self._employees and employee_id not in self.failing


def test_progress_for_employee():
    svc = LadderService(FakeLadderRepo([_employee(2, 750, 2)]))

    overview = svc.progress_for(2)

    assert overview.progress.level == 2
    assert overview.progress.hours_to_next_level == 250
    assert overview.percentage == pytest.approx(50.0)
    assert overview.time_estimate == "~2 months"
    assert overview.total_levels == 3
    assert overview.to_dict()["hourly_rate"] == "210"


def test_progress_for_unknown_employee():
    svc = LadderService(FakeLadderRepo([]))

    with pytest.raises(NotFoundError):
        svc.progress_for(42)


def test_check_level_progressions_lists_only_employees_due_for_promotion():
    repo = FakeLadderRepo([_employee(1, 750, 1), _employee(2, 750, 2), _employee(3, 1200, 2), _employee(4, 100, 1)])
    svc = LadderService(repo)

    progressions = svc.check_level_progressions()

    assert [(p.employee_id, p.current_level, p.new_level) for p in progressions] == [(1, 1, 2), (3, 2, 3)]
    assert progressions[0].current_rate == Decimal("200")
    assert progressions[0].new_rate == Decimal("210")


def test_apply_progression_requires_admin_and_existing_level():
    repo = FakeLadderRepo([_employee(1, 750, 1)])
    svc = LadderService(repo)

    with pytest.raises(AuthorizationError):
        svc.apply_progression(current_role=Role.STAFF, employee_id=1, new_level=2)
    with pytest.raises(ValidationError):
        svc.apply_progression(current_role=Role.ADMIN, employee_id=1, new_level=9)

    svc.apply_progression(current_role=Role.ADMIN, employee_id=1, new_level=2)
    assert repo.level_updates == [(1, 2)]


def test_apply_all_progressions():
    repo = FakeLadderRepo([_employee(1, 750, 1), _employee(2, 1500, 1)])
    svc = LadderService(repo)

    batch = svc.apply_all_progressions(current_role=Role.ADMIN)

    assert len(batch.applied) == 2
    assert batch.failed == ()
    assert sorted(repo.level_updates) == [(1, 2), (2, 3)]


def test_apply_all_progressions_reports_partial_failures():
    repo = FakeLadderRepo([_employee(1, 750, 1), _employee(2, 1500, 1)])
    repo.failing = {2}
    svc = LadderService(repo)

    batch = svc.apply_all_progressions(current_role=Role.ADMIN)

    assert [p.employee_id for p in batch.applied] == [1]
    assert [p.employee_id for p in batch.failed] == [2]
    assert batch.to_dict()["failed"][0]["new_level"] == 3
