from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import admin_required, current_role, handle_errors, login_required
from ..common.validators import require_int
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/ladders", methods=["GET"], endpoint="list_wage_ladders")
    @login_required
    @handle_errors
    def list_wage_ladders():
        return jsonify([ladder.to_dict() for ladder in container.ladder_service.list_ladders()])

    @app.route("/ladders/employees/<int:employee_id>/progress", methods=["GET"], endpoint="employee_progress")
    @login_required
    @handle_errors
    def employee_progress(employee_id: int):
        # Staff may only look at their own progress.
        if current_role() != Role.ADMIN and int(session["user_id"]) != employee_id:
            raise AuthorizationError("You can only view your own progress")
        overview = container.ladder_service.progress_for(employee_id)
        return jsonify(overview.to_dict())

    @app.route("/ladders/progressions", methods=["GET"], endpoint="level_progressions")
    @admin_required
    @handle_errors
    def level_progressions():
        progressions = container.ladder_service.check_level_progressions()
        return jsonify([p.to_dict() for p in progressions])

    @app.route("/ladders/progressions/apply", methods=["POST"], endpoint="apply_all_progressions")
    @admin_required
    @handle_errors
    def apply_all_progressions():
        batch = container.ladder_service.apply_all_progressions(current_role=current_role())
        return jsonify(batch.to_dict())

    @app.route("/ladders/employees/<int:employee_id>/level", methods=["POST"], endpoint="apply_progression")
    @admin_required
    @handle_errors
    def apply_progression(employee_id: int):
        payload = request.get_json(silent=True) or {}
        level = require_int(payload.get("level"), "Level")
        container.ladder_service.apply_progression(
            current_role=current_role(),
            employee_id=employee_id,
            new_level=level,
        )
        return jsonify({"employee_id": employee_id, "level": level})
