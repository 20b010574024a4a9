from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import CompetenceLevel, SalaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import EmployeeLadderInfo, LadderLevel, WageLadder
from .repository import LadderRepository

_EMPLOYEE_COLUMNS = """
    e.employee_id, e.full_name, e.salary_type, e.wage_ladder_id,
    e.current_seniority_level, e.accumulated_hours, e.contracted_hours_per_week
"""


def _to_employee(r: dict) -> EmployeeLadderInfo:
    return EmployeeLadderInfo(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        salary_type=SalaryType(r["salary_type"]),
        wage_ladder_id=int(r["wage_ladder_id"]) if r.get("wage_ladder_id") is not None else None,
        current_level=int(r["current_seniority_level"]) if r.get("current_seniority_level") is not None else None,
        accumulated_hours=float(r.get("accumulated_hours") or 0),
        contracted_hours_per_week=(
            float(r["contracted_hours_per_week"]) if r.get("contracted_hours_per_week") is not None else None
        ),
    )


class MySQLLadderRepository(LadderRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _levels_for(self, cur, ladder_id: int) -> tuple[LadderLevel, ...]:
        cur.execute(
            """
            SELECT level, min_hours, max_hours, hourly_rate
            FROM wage_ladder_levels
            WHERE ladder_id=%s
            ORDER BY level
            """,
            (int(ladder_id),),
        )
        return tuple(
            LadderLevel(
                level=int(r["level"]),
                min_hours=float(r["min_hours"]),
                max_hours=float(r["max_hours"]) if r.get("max_hours") is not None else None,
                hourly_rate=to_decimal(r["hourly_rate"]),
            )
            for r in fetchall(cur)
        )

    def get_ladder(self, ladder_id: int) -> Optional[WageLadder]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT ladder_id, name, competence_level FROM wage_ladders WHERE ladder_id=%s",
                (int(ladder_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return WageLadder(
                ladder_id=int(r["ladder_id"]),
                name=r["name"],
                competence_level=CompetenceLevel(r["competence_level"]),
                levels=self._levels_for(cur, int(r["ladder_id"])),
            )

    def list_ladders(self) -> Sequence[WageLadder]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT ladder_id, name, competence_level FROM wage_ladders ORDER BY name")
            rows = fetchall(cur)
            return [
                WageLadder(
                    ladder_id=int(r["ladder_id"]),
                    name=r["name"],
                    competence_level=CompetenceLevel(r["competence_level"]),
                    levels=self._levels_for(cur, int(r["ladder_id"])),
                )
                for r in rows
            ]

    def get_employee(self, employee_id: int) -> Optional[EmployeeLadderInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_EMPLOYEE_COLUMNS} FROM employee_details e WHERE e.employee_id=%s",
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_hourly_employees_on_ladders(self, *, ladder_id: Optional[int] = None) -> Sequence[EmployeeLadderInfo]:
        clauses = ["e.salary_type=%s", "e.wage_ladder_id IS NOT NULL"]
        params: list[object] = [SalaryType.HOURLY.value]
        if ladder_id is not None:
            clauses.append("e.wage_ladder_id=%s")
            params.append(int(ladder_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}
                FROM employee_details e
                WHERE {where}
                ORDER BY e.full_name
                """,
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def set_current_level(self, *, employee_id: int, level: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employee_details SET current_seniority_level=%s WHERE employee_id=%s",
                (int(level), int(employee_id)),
            )
            return cur.rowcount > 0
