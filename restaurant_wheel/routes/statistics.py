# restaurant_wheel/routes/statistics.py
import logging

from flask import Blueprint, jsonify

from ..extensions import db
from ..services.statistics_service import StatisticsService
from ..utils.auth import login_required

bp = Blueprint("statistics", __name__)
logger = logging.getLogger(__name__)


@bp.get("/")
@login_required
def get_statistics():
    try:
        return jsonify({"statistics": StatisticsService(db.session).get_statistics()}), 200
    except Exception:
        logger.exception("Failed to fetch statistics")
        return jsonify({"error": "Failed to fetch statistics"}), 500
