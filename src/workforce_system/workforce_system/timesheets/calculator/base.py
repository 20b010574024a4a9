from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import DeviationReport, TimeEntry


class DeviationCalculator(ABC):
    """Calculator interface (Strategy Pattern for timesheet deviations)."""

    @abstractmethod
    def calculate(self, entry: TimeEntry) -> DeviationReport:
        raise NotImplementedError

    @abstractmethod
    def worked_minutes(self, entry: TimeEntry) -> int:
        raise NotImplementedError
