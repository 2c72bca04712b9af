# restaurant_wheel/routes/wheel.py
import logging

from flask import Blueprint, current_app, jsonify, request

from ..errors import WheelError
from ..extensions import db
from ..services.restaurant_service import RestaurantService
from ..services.wheel import spin
from ..utils.auth import admin_required, login_required
from ..utils.validation import parse_bool

bp = Blueprint("wheel", __name__)
logger = logging.getLogger(__name__)


def _error(msg: str, status: int = 400):
    return jsonify({"error": msg}), status


@bp.get("/active")
@login_required
def get_active_restaurants():
    """
    GET /api/wheel/active?exclude_fast_food=true
    """
    exclude_fast_food = parse_bool(request.args.get("exclude_fast_food", "false"))
    try:
        restaurants = RestaurantService(db.session).list_active(exclude_fast_food)
        return jsonify({"restaurants": [r.to_dict() for r in restaurants]}), 200
    except Exception:
        logger.exception("Failed to fetch active restaurants")
        return _error("Failed to fetch active restaurants", 500)


@bp.post("/spin")
@admin_required
def spin_wheel():
    """
    Pick a random active restaurant. Nothing changes until the admin
    confirms the pick via /api/restaurants/<id>/confirm-upcoming.
    """
    body = request.get_json(silent=True) or {}
    exclude_fast_food = parse_bool(body.get("exclude_fast_food", False)) if isinstance(body, dict) else False

    try:
        candidates = RestaurantService(db.session).list_active(exclude_fast_food)
        selected = spin(candidates, current_app.extensions["wheel_rng"])
        logger.info("Wheel landed on restaurant %s (%d candidates)", selected.id, len(candidates))
        return jsonify({"restaurant": selected.to_dict()}), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        logger.exception("Failed to spin wheel")
        return _error("Failed to spin wheel", 500)
