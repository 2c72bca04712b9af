# restaurant_wheel/services/rating_service.py
from __future__ import annotations

import logging

from sqlalchemy import func

from ..errors import NotFoundError, ValidationError
from ..models.restaurant import Restaurant
from ..models.user import User
from ..models.visit import Visit
from ..utils.validation import is_valid_rating, utcnow

logger = logging.getLogger(__name__)


class RatingService:
    """
    Visits and ratings. A restaurant's average_rating is recomputed from all
    of its attended, rated visits in the same transaction as every write.
    """

    def __init__(self, session):
        self.session = session

    def list_visits(self, restaurant_id: int) -> list[Visit]:
        return (
            self.session.query(Visit)
            .filter(Visit.restaurant_id == restaurant_id)
            .order_by(Visit.id.asc())
            .all()
        )

    def get_visit(self, restaurant_id: int, user_id: int) -> Visit | None:
        return (
            self.session.query(Visit)
            .filter(Visit.restaurant_id == restaurant_id, Visit.user_id == user_id)
            .first()
        )

    def mark_attendance(self, restaurant_id: int, user_ids: list[int]) -> list[Visit]:
        if not user_ids:
            raise ValidationError("At least one user must attend")

        self._require_restaurant(restaurant_id)
        self._require_users(user_ids)

        try:
            visits = [self._upsert_visit(restaurant_id, user_id) for user_id in dict.fromkeys(user_ids)]
            self.recalculate_average_rating(restaurant_id, commit=False)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("Attendance marked for restaurant %s: users %s", restaurant_id, list(user_ids))
        return visits

    def submit_rating(self, restaurant_id: int, user_id: int, rating) -> Visit:
        if not is_valid_rating(rating):
            raise ValidationError("Rating must be a positive number")

        self._require_restaurant(restaurant_id)
        self._require_users([user_id])

        try:
            visit = self._upsert_visit(restaurant_id, user_id)
            visit.rating = float(rating)
            self.recalculate_average_rating(restaurant_id, commit=False)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("User %s rated restaurant %s: %s", user_id, restaurant_id, rating)
        return visit

    def recalculate_average_rating(self, restaurant_id: int, commit: bool = True) -> float:
        # flush pending visit writes so the aggregate sees them
        self.session.flush()

        avg_rating = (
            self.session.query(func.avg(Visit.rating))
            .filter(
                Visit.restaurant_id == restaurant_id,
                Visit.rating.isnot(None),
                Visit.attended.is_(True),
            )
            .scalar()
        )
        average = float(avg_rating) if avg_rating is not None else 0.0

        restaurant = self._require_restaurant(restaurant_id)
        restaurant.average_rating = average

        if commit:
            self.session.commit()
        return average

    ###########
    # HELPERS
    ###########

    def _upsert_visit(self, restaurant_id: int, user_id: int) -> Visit:
        visit = self.get_visit(restaurant_id, user_id)
        if visit is None:
            visit = Visit(restaurant_id=restaurant_id, user_id=user_id, attended=True)
            self.session.add(visit)
        else:
            visit.attended = True
            visit.updated_at = utcnow()
        return visit

    def _require_restaurant(self, restaurant_id: int) -> Restaurant:
        restaurant = self.session.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def _require_users(self, user_ids: list[int]) -> None:
        wanted = set(user_ids)
        found = {
            row.id
            for row in self.session.query(User.id).filter(User.id.in_(wanted)).all()
        }
        missing = wanted - found
        if missing:
            raise NotFoundError(f"User not found: {', '.join(str(u) for u in sorted(missing))}")
