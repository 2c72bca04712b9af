# restaurant_wheel/routes/visits.py
from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from ..errors import WheelError
from ..extensions import db
from ..services.rating_service import RatingService
from ..utils.auth import admin_required, current_user, login_required

bp = Blueprint("visits", __name__)
logger = logging.getLogger(__name__)


def _error(msg: str, status: int = 400):
    return jsonify({"error": msg}), status

def _is_id(v) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and v > 0

def _failed(action: str):
    db.session.rollback()
    logger.exception("Failed to %s", action)
    return _error(f"Failed to {action}", 500)


@bp.get("/<int:restaurant_id>")
@login_required
def get_visits(restaurant_id: int):
    try:
        visits = RatingService(db.session).list_visits(restaurant_id)
        return jsonify({"visits": [v.to_dict() for v in visits]}), 200
    except Exception:
        return _failed("fetch visits")


@bp.post("/<int:restaurant_id>/attendance")
@admin_required
def mark_attendance(restaurant_id: int):
    body = request.get_json(silent=True) or {}
    user_ids = body.get("user_ids") if isinstance(body, dict) else None

    if not isinstance(user_ids, list):
        return _error("user_ids must be a list of user IDs")
    if not all(_is_id(u) for u in user_ids):
        return _error("user_ids must be a list of user IDs")

    try:
        visits = RatingService(db.session).mark_attendance(restaurant_id, user_ids)
        return jsonify({
            "message": "Attendance marked successfully",
            "visits": [v.to_dict() for v in visits],
        }), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("mark attendance")


@bp.post("/<int:restaurant_id>/rate")
@login_required
def submit_rating(restaurant_id: int):
    """
    POST {"rating": 8} rates as the caller.
    Admins may pass "user_id" to record someone else's rating.
    """
    user = current_user()
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return _error("user_id and valid rating are required")

    user_id = body.get("user_id", user.id)
    if not _is_id(user_id):
        return _error("user_id and valid rating are required")
    if user_id != user.id and not user.is_admin:
        return _error("Forbidden: Admin access required", 403)

    try:
        visit = RatingService(db.session).submit_rating(restaurant_id, user_id, body.get("rating"))
        return jsonify({"visit": visit.to_dict()}), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("submit rating")
