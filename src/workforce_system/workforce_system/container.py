from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .deviations.mysql_ledger_repository import MySQLLedgerRepository
from .deviations.repository import LedgerRepository
from .deviations.service import DeviationService
from .ladders.mysql_ladder_repository import MySQLLadderRepository
from .ladders.repository import LadderRepository
from .ladders.service import LadderService
from .payroll.service import BackPayService
from .timesheets.calculator.standard_calculator import StandardDeviationCalculator
from .timesheets.model import TimesheetSettings
from .timesheets.mysql_time_entry_repository import MySQLTimeEntryRepository
from .timesheets.repository import TimeEntryRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    ladders_repo: LadderRepository
    time_entries_repo: TimeEntryRepository
    ledger_repo: LedgerRepository

    ladder_service: LadderService
    deviation_service: DeviationService
    back_pay_service: BackPayService


def build_services(
    *,
    conn: Optional[DatabaseConnection],
    ladders_repo: LadderRepository,
    time_entries_repo: TimeEntryRepository,
    ledger_repo: LedgerRepository,
    settings: Optional[TimesheetSettings] = None,
) -> Container:
    settings = settings or TimesheetSettings()
    calculator = StandardDeviationCalculator(threshold_minutes=settings.threshold_minutes)

    return Container(
        conn=conn,
        ladders_repo=ladders_repo,
        time_entries_repo=time_entries_repo,
        ledger_repo=ledger_repo,
        ladder_service=LadderService(ladders_repo),
        deviation_service=DeviationService(
            time_entries_repo,
            ledger_repo,
            calculator=calculator,
            settings=settings,
        ),
        back_pay_service=BackPayService(ladders_repo, time_entries_repo, calculator=calculator),
    )


def build_container(*, db_config: dict, settings: Optional[TimesheetSettings] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        conn=conn,
        ladders_repo=MySQLLadderRepository(conn),
        time_entries_repo=MySQLTimeEntryRepository(conn),
        ledger_repo=MySQLLedgerRepository(conn),
        settings=settings,
    )
