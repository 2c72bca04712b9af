# restaurant_wheel/models/user.py
from ..extensions import db
from .restaurant import _iso


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    # token subject; null until a provisional user first signs in
    auth_sub = db.Column(db.String(255), nullable=True, unique=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    name = db.Column(db.Text, nullable=True)

    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    is_whitelisted = db.Column(db.Boolean, nullable=False, default=False)
    is_provisional = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "is_admin": bool(self.is_admin),
            "is_whitelisted": bool(self.is_whitelisted),
            "is_provisional": bool(self.is_provisional),
            "created_at": _iso(self.created_at),
        }
