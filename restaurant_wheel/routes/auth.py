# restaurant_wheel/routes/auth.py
from flask import Blueprint, jsonify

from ..utils.auth import current_user, login_required

bp = Blueprint("auth", __name__)


@bp.get("/me")
@login_required
def get_me():
    return jsonify({"user": current_user().to_dict()}), 200
