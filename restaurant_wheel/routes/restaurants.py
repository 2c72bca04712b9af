# restaurant_wheel/routes/restaurants.py
from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from ..errors import NotFoundError, ValidationError, WheelError
from ..extensions import db
from ..models.user import User
from ..services.restaurant_service import UPDATABLE_FIELDS, RestaurantService
from ..services.statistics_service import StatisticsService
from ..utils.auth import admin_required, current_user, login_required
from ..utils.validation import parse_bool

bp = Blueprint("restaurants", __name__)
logger = logging.getLogger(__name__)

###########
# HELPERS
###########

def _error(msg: str, status: int = 400):
    return jsonify({"error": msg}), status

def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}

def _failed(action: str):
    db.session.rollback()
    logger.exception("Failed to %s", action)
    return _error(f"Failed to {action}", 500)

###########################
# GET ENDPOINTS
###########################

@bp.get("/")
def get_restaurants():
    """
    GET /api/restaurants?state=active&search=pizza&sort=rating&user_id=3
    """
    user_id = request.args.get("user_id")
    if user_id is not None and not user_id.isdigit():
        return _error("Invalid user ID")

    try:
        restaurants = RestaurantService(db.session).list_restaurants(
            state=request.args.get("state") or None,
            nominated_by=int(user_id) if user_id else None,
            search=request.args.get("search") or None,
            sort=request.args.get("sort") or None,
        )
        return jsonify({"restaurants": [r.to_dict() for r in restaurants]}), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("fetch restaurants")


@bp.get("/stats/overall")
def get_overall_stats():
    try:
        return jsonify(StatisticsService(db.session).overall()), 200
    except Exception:
        return _failed("fetch statistics")


@bp.get("/<int:restaurant_id>")
def get_restaurant(restaurant_id: int):
    try:
        restaurant = RestaurantService(db.session).get(restaurant_id)
        if restaurant is None:
            return _error("Restaurant not found", 404)
        return jsonify({"restaurant": restaurant.to_dict()}), 200
    except Exception:
        return _failed("fetch restaurant")

###########################
# NOMINATION
###########################

@bp.post("/")
@login_required
def create_restaurant():
    user = current_user()
    body = _json_body()

    try:
        nominator_id = user.id
        created_by_admin_id = None

        # Admins may nominate on behalf of another user
        on_behalf_of = body.get("nominated_by_user_id")
        if user.is_admin and on_behalf_of:
            if isinstance(on_behalf_of, bool) or not isinstance(on_behalf_of, int):
                raise ValidationError("Invalid user ID")
            if db.session.get(User, on_behalf_of) is None:
                raise NotFoundError("User not found")
            nominator_id = on_behalf_of
            created_by_admin_id = user.id

        restaurant = RestaurantService(db.session).nominate(
            body.get("name"),
            body.get("address"),
            parse_bool(body.get("is_fast_food", False)),
            nominator_id,
            admin_id=created_by_admin_id,
            menu_link=body.get("menu_link"),
            photo_link=body.get("photo_link"),
        )
        return jsonify({"restaurant": restaurant.to_dict()}), 201
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("create restaurant")

###########################
# ADMIN
###########################

@bp.patch("/<int:restaurant_id>")
@admin_required
def update_restaurant(restaurant_id: int):
    body = _json_body()
    fields = {k: body[k] for k in UPDATABLE_FIELDS if k in body}

    try:
        restaurant = RestaurantService(db.session).update(restaurant_id, fields)
        return jsonify({"restaurant": restaurant.to_dict()}), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("update restaurant")


@bp.delete("/<int:restaurant_id>")
@admin_required
def delete_restaurant(restaurant_id: int):
    try:
        RestaurantService(db.session).delete(restaurant_id)
        return jsonify({"message": "Restaurant deleted successfully"}), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("delete restaurant")


@bp.post("/<int:restaurant_id>/approve")
@admin_required
def approve_restaurant(restaurant_id: int):
    try:
        restaurant = RestaurantService(db.session).approve(restaurant_id)
        return jsonify({"restaurant": restaurant.to_dict()}), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("approve restaurant")


@bp.post("/<int:restaurant_id>/reject")
@admin_required
def reject_restaurant(restaurant_id: int):
    try:
        RestaurantService(db.session).reject(restaurant_id)
        return jsonify({"message": "Restaurant rejected successfully"}), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("reject restaurant")


@bp.post("/<int:restaurant_id>/confirm-upcoming")
@admin_required
def confirm_upcoming(restaurant_id: int):
    """Commit a wheel pick: active -> upcoming."""
    body = _json_body()
    try:
        restaurant = RestaurantService(db.session).confirm_upcoming(
            restaurant_id,
            reservation_datetime=body.get("reservation_datetime"),
        )
        return jsonify({"restaurant": restaurant.to_dict()}), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("confirm selection")


@bp.post("/<int:restaurant_id>/mark-visited")
@admin_required
def mark_visited(restaurant_id: int):
    try:
        restaurant = RestaurantService(db.session).mark_visited(restaurant_id)
        return jsonify({"restaurant": restaurant.to_dict()}), 200
    except WheelError as e:
        return _error(e.message, e.status_code)
    except Exception:
        return _failed("mark as visited")
