# restaurant_wheel/routes/admin.py
import logging

from flask import Blueprint, jsonify, request

from ..errors import WheelError
from ..extensions import db
from ..services.restaurant_service import RestaurantService
from ..utils.auth import admin_required, user_service

bp = Blueprint("admin", __name__)
logger = logging.getLogger(__name__)


def _error(msg: str, status: int = 400):
    return jsonify({"error": msg}), status

def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}

def _failed(action: str):
    db.session.rollback()
    logger.exception("Failed to %s", action)
    return _error(f"Failed to {action}", 500)

###############################
# USERS
###############################

@bp.get("/users")
@admin_required
def get_users():
    try:
        return jsonify({"users": [u.to_dict() for u in user_service().list_users()]}), 200
    except Exception:
        return _failed("fetch users")


@bp.patch("/users/<int:user_id>")
@admin_required
def update_user(user_id: int):
    body = _json_body()
    fields = {k: body[k] for k in ("name", "email") if k in body}
    try:
        user = user_service().update_user(user_id, fields)
        return jsonify({"user": user.to_dict()}), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("update user")


@bp.post("/users/provisional")
@admin_required
def create_provisional_user():
    body = _json_body()
    try:
        user = user_service().create_provisional(body.get("email"), body.get("name"))
        return jsonify({"user": user.to_dict()}), 201
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("create provisional user")

###############################
# NOMINATIONS
###############################

@bp.get("/nominations/pending")
@admin_required
def get_pending_nominations():
    try:
        pending = RestaurantService(db.session).list_restaurants(state="pending")
        return jsonify({"nominations": [r.to_dict() for r in pending]}), 200
    except Exception:
        return _failed("fetch pending nominations")
