from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    IncompleteDistributionError,
    InvalidLadderError,
    NotFoundError,
    PersistenceError,
    SessionCommittedError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (IncompleteDistributionError, 409),
    (SessionCommittedError, 409),
    (InvalidLadderError, 422),
    (PersistenceError, 503),
)


def error_response(e: DomainError):
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls)), 400)
    body = {"error": str(e)}
    if isinstance(e, IncompleteDistributionError):
        body["remaining_minutes"] = e.remaining_minutes
    return jsonify(body), status


def handle_errors(view):
    """Translate domain errors into JSON responses; anything else is a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected error in %s", view.__name__)
            return jsonify({"error": "Internal server error"}), 500

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Login required"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Login required"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"error": "Administrator access required"}), 403
        return view(*args, **kwargs)

    return wrapper


def current_role() -> Role:
    return Role(session.get("role"))
