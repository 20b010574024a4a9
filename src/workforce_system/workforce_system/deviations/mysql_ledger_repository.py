from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DistributionCategory, TimeEntryStatus
from ..core.exceptions import PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CommitResult
from .repository import LedgerRepository


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record_commit(self, *, result: CommitResult, handled_by: Optional[int]) -> Sequence[int]:
        ids: list[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for e in result.entries:
                cur.execute(
                    """
                    INSERT INTO time_entry_deviations(
                        time_entry_id, employee_id, deviation_type, deviation_minutes,
                        handling, description, notes, handled_by, handled_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        e.time_entry_id,
                        e.employee_id,
                        e.deviation_type.value,
                        e.minutes,
                        e.category.value,
                        e.description,
                        e.notes,
                        handled_by,
                        result.committed_at,
                    ),
                )
                ids.append(int(cur.lastrowid))

                if e.category == DistributionCategory.TIME_BANK:
                    cur.execute(
                        """
                        INSERT INTO account_transactions(
                            employee_id, account_type, year, amount_hours, description,
                            reference_type, reference_id, created_by
                        )
                        VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                        """,
                        (
                            e.employee_id,
                            DistributionCategory.TIME_BANK.value,
                            result.committed_at.year,
                            e.hours,
                            e.description,
                            "time_entry",
                            e.time_entry_id,
                            handled_by,
                        ),
                    )

            cur.execute(
                """
                UPDATE time_entries
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE time_entry_id=%s AND status=%s
                """,
                (
                    TimeEntryStatus.APPROVED.value,
                    handled_by,
                    result.committed_at,
                    result.time_entry_id,
                    TimeEntryStatus.PENDING.value,
                ),
            )
            if cur.rowcount == 0:
                # Raising inside the cursor block rolls the inserts back.
                raise PersistenceError(f"Time entry {result.time_entry_id} is no longer pending")

        return ids

    def balance_minutes(self, *, employee_id: int, category: DistributionCategory) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(deviation_minutes), 0) AS total
                FROM time_entry_deviations
                WHERE employee_id=%s AND handling=%s
                """,
                (int(employee_id), category.value),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_for_time_entry(self, *, time_entry_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT deviation_id, deviation_type, deviation_minutes, handling,
                       description, notes, handled_by, handled_at
                FROM time_entry_deviations
                WHERE time_entry_id=%s
                ORDER BY deviation_id
                """,
                (int(time_entry_id),),
            )
            return [
                {
                    "deviation_id": int(r["deviation_id"]),
                    "deviation_type": r["deviation_type"],
                    "minutes": int(r["deviation_minutes"]),
                    "handling": r["handling"],
                    "description": r.get("description") or "",
                    "notes": r.get("notes") or "",
                    "handled_by": r.get("handled_by"),
                    "handled_at": r["handled_at"].strftime("%Y-%m-%d %H:%M") if r.get("handled_at") else "-",
                }
                for r in fetchall(cur)
            ]
