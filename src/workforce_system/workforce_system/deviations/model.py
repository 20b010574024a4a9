from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from ..core.enums import DeviationType, DistributionCategory, SessionState
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DistributionSession:
    """Working state of one deviation review.

    ``buckets`` hold unsigned minutes; the sign lives on
    ``total_deviation_minutes`` only. Treat instances as values: the
    allocator functions always return a new session.
    """

    time_entry_id: int
    employee_id: int
    total_deviation_minutes: int
    buckets: Mapping[DistributionCategory, int]
    state: SessionState = SessionState.INITIALIZED
    deviation_type: Optional[DeviationType] = None

    def __post_init__(self):
        # Private read-only copy; replace() runs this again for every new session.
        buckets = MappingProxyType({c: self.buckets.get(c, 0) for c in DistributionCategory})
        object.__setattr__(self, "buckets", buckets)

    def __hash__(self):
        return hash(
            (
                self.time_entry_id,
                self.employee_id,
                self.total_deviation_minutes,
                tuple(self.buckets.values()),
                self.state,
                self.deviation_type,
            )
        )

    @property
    def magnitude(self) -> int:
        return abs(self.total_deviation_minutes)

    @property
    def is_surplus(self) -> bool:
        return self.total_deviation_minutes > 0

    @property
    def total_distributed(self) -> int:
        return sum(self.buckets.values())

    @property
    def remaining(self) -> int:
        return self.magnitude - self.total_distributed

    def to_dict(self) -> dict:
        return {
            "time_entry_id": self.time_entry_id,
            "employee_id": self.employee_id,
            "total_deviation_minutes": self.total_deviation_minutes,
            "buckets": {c.value: int(self.buckets.get(c, 0)) for c in DistributionCategory},
            "state": self.state.value,
            "deviation_type": self.deviation_type.value if self.deviation_type else None,
            "remaining": self.remaining,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DistributionSession":
        try:
            raw = data.get("buckets") or {}
            buckets = {c: int(raw.get(c.value, 0)) for c in DistributionCategory}
            session = cls(
                time_entry_id=int(data["time_entry_id"]),
                employee_id=int(data["employee_id"]),
                total_deviation_minutes=int(data["total_deviation_minutes"]),
                buckets=buckets,
                state=SessionState(data.get("state", SessionState.INITIALIZED.value)),
                deviation_type=DeviationType(data["deviation_type"]) if data.get("deviation_type") else None,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid distribution session: {e}") from e

        if any(v < 0 for v in buckets.values()) or session.remaining < 0:
            raise ValidationError("Invalid distribution session: buckets exceed the deviation")
        return session


@dataclass(frozen=True)
class LedgerEntry:
    """One account transaction produced by a committed distribution."""

    time_entry_id: int
    employee_id: int
    category: DistributionCategory
    minutes: int
    description: str
    deviation_type: DeviationType
    notes: Optional[str] = None

    @property
    def hours(self) -> float:
        return round(self.minutes / 60, 2)

    def to_dict(self) -> dict:
        return {
            "time_entry_id": self.time_entry_id,
            "employee_id": self.employee_id,
            "category": self.category.value,
            "minutes": self.minutes,
            "hours": self.hours,
            "description": self.description,
            "deviation_type": self.deviation_type.value,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class CommitResult:
    time_entry_id: int
    entries: tuple[LedgerEntry, ...]
    summary: str
    committed_at: datetime
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "time_entry_id": self.time_entry_id,
            "entries": [e.to_dict() for e in self.entries],
            "summary": self.summary,
            "committed_at": self.committed_at.isoformat(timespec="seconds"),
            "notes": self.notes,
        }
