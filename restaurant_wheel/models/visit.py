# restaurant_wheel/models/visit.py
from ..extensions import db
from .restaurant import _iso


class Visit(db.Model):
    """One user's attendance and rating for one restaurant."""

    __tablename__ = "visits"

    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(
        db.Integer,
        db.ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    attended = db.Column(db.Boolean, nullable=False, default=False)
    rating = db.Column(db.Float, nullable=True)

    user = db.relationship("User")

    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    __table_args__ = (
        db.UniqueConstraint("restaurant_id", "user_id", name="unique_user_restaurant_visit"),
        db.Index("idx_visits_restaurant_id", "restaurant_id"),
        db.Index("idx_visits_user_id", "user_id"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "restaurant_id": self.restaurant_id,
            "user_id": self.user_id,
            "user": self.user.to_dict() if self.user else None,
            "attended": bool(self.attended),
            "rating": self.rating,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
