from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import TimeEntryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import TimeEntry
from .repository import TimeEntryRepository

_COLUMNS = """
    time_entry_id, employee_id, work_date, clock_in, clock_out, break_minutes,
    planned_start, planned_end, planned_break_minutes, status
"""


def _to_entry(r: dict) -> TimeEntry:
    return TimeEntry(
        time_entry_id=int(r["time_entry_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        clock_in=r["clock_in"],
        clock_out=r.get("clock_out"),
        break_minutes=int(r.get("break_minutes") or 0),
        planned_start=normalize_mysql_time(r.get("planned_start")),
        planned_end=normalize_mysql_time(r.get("planned_end")),
        planned_break_minutes=int(r.get("planned_break_minutes") or 0),
        status=TimeEntryStatus(r["status"]),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, time_entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_entries WHERE time_entry_id=%s", (int(time_entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_for_employee(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        status: Optional[TimeEntryStatus] = None,
    ) -> Sequence[TimeEntry]:
        clauses = ["employee_id=%s", "work_date BETWEEN %s AND %s"]
        params: list[object] = [int(employee_id), start_date, end_date]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_entries WHERE {where} ORDER BY work_date, clock_in",
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def mark_resolved(self, *, time_entry_id: int, approved_by: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET status=%s, approved_by=%s, approved_at=NOW()
                WHERE time_entry_id=%s AND status=%s
                """,
                (
                    TimeEntryStatus.APPROVED.value,
                    approved_by,
                    int(time_entry_id),
                    TimeEntryStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
