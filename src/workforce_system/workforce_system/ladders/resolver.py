"""Wage-level lookup from accumulated hours.

Pure functions only; the caller supplies an immutable snapshot of the
ladder's levels.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..common.validators import require_non_negative
from ..core.constants import WEEKS_PER_MONTH
from ..core.exceptions import InvalidLadderError
from .model import LadderLevel, TenureProgress


def sorted_levels(levels: Sequence[LadderLevel]) -> list[LadderLevel]:
    """Validate ``levels`` and return them ordered by level number."""

    if not levels:
        raise InvalidLadderError("Wage ladder has no levels")

    ordered = sorted(levels, key=lambda lv: lv.level)
    seen: set[int] = set()
    for lv in ordered:
        if lv.level < 1:
            raise InvalidLadderError(f"Level {lv.level} must be a positive number")
        if lv.level in seen:
            raise InvalidLadderError(f"Level {lv.level} appears more than once")
        seen.add(lv.level)
        if lv.min_hours < 0:
            raise InvalidLadderError(f"Level {lv.level}: min_hours must be >= 0")
        if lv.max_hours is not None and lv.max_hours <= lv.min_hours:
            raise InvalidLadderError(f"Level {lv.level}: max_hours must be greater than min_hours")

    for prev, cur in zip(ordered, ordered[1:]):
        if prev.max_hours is None:
            raise InvalidLadderError(f"Level {prev.level} is open-ended but is not the top level")
        if cur.min_hours < prev.max_hours:
            raise InvalidLadderError(f"Levels {prev.level} and {cur.level} overlap")

    return ordered


def _current_index(ordered: list[LadderLevel], hours: float) -> int:
    for i, lv in enumerate(ordered):
        if lv.contains(hours):
            return i

    # Gap between levels: highest level already reached.
    reached = [i for i, lv in enumerate(ordered) if lv.min_hours <= hours]
    if reached:
        return reached[-1]
    return 0


def resolve_level(levels: Sequence[LadderLevel], accumulated_hours: float) -> TenureProgress:
    ordered = sorted_levels(levels)
    require_non_negative(accumulated_hours, "Accumulated hours")

    idx = _current_index(ordered, accumulated_hours)
    current = ordered[idx]

    if idx + 1 >= len(ordered):
        return TenureProgress(level=current.level, hourly_rate=current.hourly_rate)

    nxt = ordered[idx + 1]
    return TenureProgress(
        level=current.level,
        hourly_rate=current.hourly_rate,
        next_level=nxt.level,
        next_hourly_rate=nxt.hourly_rate,
        hours_to_next_level=max(nxt.min_hours - accumulated_hours, 0),
    )


def progress_percentage(levels: Sequence[LadderLevel], accumulated_hours: float) -> float:
    """How far through the current level the employee is, 0-100."""

    progress = resolve_level(levels, accumulated_hours)
    if progress.hours_to_next_level is None:
        return 100.0

    current = next(lv for lv in levels if lv.level == progress.level)
    done = max(accumulated_hours - current.min_hours, 0)
    needed = done + progress.hours_to_next_level
    if needed == 0:
        return 100.0
    return min(100.0, done / needed * 100)


def estimate_time_to_next_level(progress: TenureProgress, contracted_hours_per_week: float) -> Optional[str]:
    """Rough calendar estimate for reaching the next level at contracted hours."""

    if not progress.hours_to_next_level:
        return None
    if not contracted_hours_per_week or contracted_hours_per_week <= 0:
        return None

    months = progress.hours_to_next_level / (contracted_hours_per_week * WEEKS_PER_MONTH)
    if months < 1:
        weeks = math.ceil(months * 4)
        return f"~{weeks} week{'s' if weeks != 1 else ''}"
    if months < 12:
        whole = math.ceil(months)
        return f"~{whole} month{'s' if whole != 1 else ''}"

    years = math.floor(months / 12)
    rest = math.ceil(months % 12)
    label = f"~{years} year{'s' if years != 1 else ''}"
    if rest > 0:
        label += f" {rest} month{'s' if rest != 1 else ''}"
    return label
