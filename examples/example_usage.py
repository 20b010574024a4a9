"""Example: drive the deviation allocator and ladder resolver without Flask or a database."""

from decimal import Decimal

from src.workforce_system.workforce_system.core.enums import DistributionCategory
from src.workforce_system.workforce_system.deviations import allocator
from src.workforce_system.workforce_system.ladders.model import LadderLevel
from src.workforce_system.workforce_system.ladders.resolver import resolve_level


def main():
    levels = [
        LadderLevel(level=1, min_hours=0, max_hours=500, hourly_rate=Decimal("200")),
        LadderLevel(level=2, min_hours=500, max_hours=1000, hourly_rate=Decimal("210")),
        LadderLevel(level=3, min_hours=1000, max_hours=None, hourly_rate=Decimal("225")),
    ]
    print(resolve_level(levels, 750))

    session = allocator.start_session(time_entry_id=1, employee_id=2, total_deviation_minutes=-30)
    session = allocator.set_bucket(session, DistributionCategory.IGNORE, 10)
    session = allocator.set_bucket(session, DistributionCategory.OVERTIME_50, 20)
    _, result = allocator.commit(session, "Left early for a doctor's appointment")
    print(result.summary)


if __name__ == "__main__":
    main()
