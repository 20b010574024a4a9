from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import admin_required, current_role, handle_errors, login_required
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..container import Container
from . import allocator
from .model import DistributionSession

_SESSION_KEY = "deviation_sessions"


def _load(time_entry_id: int) -> DistributionSession:
    data = session.get(_SESSION_KEY, {}).get(str(time_entry_id))
    if not data:
        raise NotFoundError("No open deviation review for this time entry")
    return DistributionSession.from_dict(data)


def _store(dist: DistributionSession) -> None:
    sessions = dict(session.get(_SESSION_KEY, {}))
    sessions[str(dist.time_entry_id)] = dist.to_dict()
    session[_SESSION_KEY] = sessions


def _discard(time_entry_id: int) -> None:
    sessions = dict(session.get(_SESSION_KEY, {}))
    sessions.pop(str(time_entry_id), None)
    session[_SESSION_KEY] = sessions


def _view(dist: DistributionSession, **extra) -> dict:
    body = {
        "session": dist.to_dict(),
        "fully_distributed": allocator.is_fully_distributed(dist),
        "quick_assign": [c.value for c in allocator.quick_assign_options(dist)],
    }
    body.update(extra)
    return body


def register(app: Flask, container: Container) -> None:
    svc = container.deviation_service

    @app.route("/deviations/<int:time_entry_id>/session", methods=["POST"], endpoint="open_deviation_session")
    @admin_required
    @handle_errors
    def open_deviation_session(time_entry_id: int):
        dist, report = svc.open_session(current_role=current_role(), time_entry_id=time_entry_id)
        _store(dist)
        return jsonify(_view(dist, deviations=[d.to_dict() for d in report.details])), 201

    @app.route("/deviations/<int:time_entry_id>/session", methods=["GET"], endpoint="get_deviation_session")
    @admin_required
    @handle_errors
    def get_deviation_session(time_entry_id: int):
        return jsonify(_view(_load(time_entry_id)))

    @app.route("/deviations/<int:time_entry_id>/session", methods=["DELETE"], endpoint="cancel_deviation_session")
    @admin_required
    @handle_errors
    def cancel_deviation_session(time_entry_id: int):
        _discard(time_entry_id)
        return "", 204

    @app.route("/deviations/<int:time_entry_id>/bucket", methods=["POST"], endpoint="set_deviation_bucket")
    @admin_required
    @handle_errors
    def set_deviation_bucket(time_entry_id: int):
        payload = request.get_json(silent=True) or {}
        dist = svc.set_bucket(_load(time_entry_id), payload.get("category", ""), payload.get("minutes"))
        _store(dist)
        return jsonify(_view(dist))

    @app.route("/deviations/<int:time_entry_id>/quick-assign", methods=["POST"], endpoint="quick_assign_deviation")
    @admin_required
    @handle_errors
    def quick_assign_deviation(time_entry_id: int):
        payload = request.get_json(silent=True) or {}
        dist = svc.quick_assign(_load(time_entry_id), payload.get("category", ""))
        _store(dist)
        return jsonify(_view(dist))

    @app.route("/deviations/<int:time_entry_id>/commit", methods=["POST"], endpoint="commit_deviation")
    @admin_required
    @handle_errors
    def commit_deviation(time_entry_id: int):
        payload = request.get_json(silent=True) or {}
        _, result = svc.commit(
            current_role=current_role(),
            admin_user_id=int(session["user_id"]),
            session=_load(time_entry_id),
            notes=payload.get("notes"),
        )
        _discard(time_entry_id)
        return jsonify(result.to_dict())

    @app.route("/deviations/<int:time_entry_id>/auto-approve", methods=["POST"], endpoint="auto_approve_time_entry")
    @admin_required
    @handle_errors
    def auto_approve_time_entry(time_entry_id: int):
        approved = svc.auto_approve_if_within_margin(time_entry_id=time_entry_id)
        return jsonify({"time_entry_id": time_entry_id, "auto_approved": approved})

    @app.route(
        "/deviations/employees/<int:employee_id>/balance/<category>",
        methods=["GET"],
        endpoint="deviation_balance",
    )
    @login_required
    @handle_errors
    def deviation_balance(employee_id: int, category: str):
        if current_role() != Role.ADMIN and int(session["user_id"]) != employee_id:
            raise AuthorizationError("You can only view your own balance")
        minutes = svc.balance_for(employee_id=employee_id, category=category)
        return jsonify({"employee_id": employee_id, "category": category, "minutes": minutes})

    @app.route("/deviations/<int:time_entry_id>/ledger", methods=["GET"], endpoint="deviation_ledger")
    @admin_required
    @handle_errors
    def deviation_ledger(time_entry_id: int):
        return jsonify(svc.history_for(time_entry_id=time_entry_id))
