from __future__ import annotations

import math

from ..core.exceptions import ValidationError


def require_int(value, field_name: str) -> int:
    """Whole numbers only; fractional, non-finite and boolean values are rejected, never truncated."""

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field_name} must be a whole number")
    if not isinstance(value, str) and value != number:
        raise ValidationError(f"{field_name} must be a whole number")
    return number


def require_non_negative(value: float, field_name: str) -> float:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be >= 0")
    try:
        finite = math.isfinite(value)
    except TypeError:
        raise ValidationError(f"{field_name} must be a number")
    if not finite or value < 0:
        raise ValidationError(f"{field_name} must be a finite number >= 0")
    return value
