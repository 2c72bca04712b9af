# restaurant_wheel/models/restaurant.py
from __future__ import annotations

from ..extensions import db

RESTAURANT_STATES = ("pending", "active", "upcoming", "visited")


def _iso(value):
    return value.isoformat() if value is not None else None


class Restaurant(db.Model):
    __tablename__ = "restaurants"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.Text, nullable=False)
    address = db.Column(db.Text, nullable=False)
    is_fast_food = db.Column(db.Boolean, nullable=False, default=False)

    menu_link = db.Column(db.Text, nullable=True)
    photo_link = db.Column(db.Text, nullable=True)

    state = db.Column(db.String(16), nullable=False, default="pending", index=True)

    nominated_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_by_admin_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    # derived from visits, see RatingService.recalculate_average_rating
    average_rating = db.Column(db.Float, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    visited_at = db.Column(db.DateTime, nullable=True)
    reservation_datetime = db.Column(db.DateTime, nullable=True)

    nominated_by = db.relationship("User", foreign_keys=[nominated_by_user_id])

    visits = db.relationship(
        "Visit",
        backref="restaurant",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.CheckConstraint(
            "state IN ('pending', 'active', 'upcoming', 'visited')",
            name="ck_restaurants_state",
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "is_fast_food": bool(self.is_fast_food),
            "menu_link": self.menu_link,
            "photo_link": self.photo_link,
            "state": self.state,
            "nominated_by_user_id": self.nominated_by_user_id,
            "nominated_by": self.nominated_by.to_dict() if self.nominated_by else None,
            "created_by_admin_id": self.created_by_admin_id,
            "average_rating": float(self.average_rating or 0),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "visited_at": _iso(self.visited_at),
            "reservation_datetime": _iso(self.reservation_datetime),
        }
