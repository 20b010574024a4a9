from __future__ import annotations

from decimal import Decimal, InvalidOperation

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import admin_required, handle_errors
from ..common.validators import require_int
from ..core.exceptions import ValidationError
from ..container import Container


def _parse_rate(value, field_name: str) -> Decimal:
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, TypeError):
        raise ValidationError(f"{field_name} is not a valid amount")
    if not rate.is_finite():
        raise ValidationError(f"{field_name} is not a valid amount")
    return rate


def register(app: Flask, container: Container) -> None:
    @app.route("/payroll/back-pay", methods=["POST"], endpoint="calculate_back_pay")
    @admin_required
    @handle_errors
    def calculate_back_pay():
        payload = request.get_json(silent=True) or {}
        try:
            effective_from = parse_iso_date(payload.get("effective_from") or "")
        except (TypeError, ValueError):
            raise ValidationError("effective_from must be YYYY-MM-DD")

        rows = container.back_pay_service.calculate_for_ladder_change(
            ladder_id=require_int(payload.get("ladder_id"), "Ladder"),
            level=require_int(payload.get("level"), "Level"),
            old_rate=_parse_rate(payload.get("old_rate"), "old_rate"),
            new_rate=_parse_rate(payload.get("new_rate"), "new_rate"),
            effective_from=effective_from,
            today=now_local().date(),
        )
        return jsonify([r.to_dict() for r in rows])
