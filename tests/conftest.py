"""Shared fixtures: an in-memory app, seeded users and bearer tokens."""

import time

import pytest
from authlib.jose import jwt

from restaurant_wheel import create_app
from restaurant_wheel.extensions import db
from restaurant_wheel.models import User

JWT_SECRET = "test-secret-that-is-long-enough-for-hs256"

ADMIN_ID, MEMBER_ID, FRIEND_ID = 1, 7, 9


class TestingConfig:
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ["http://localhost:5173"]
    AUTH0_DOMAIN = None
    JWT_SECRET = JWT_SECRET
    JWT_ISSUER = None
    ADMIN_EMAILS = ["admin@example.com"]
    WHITELISTED_EMAILS = ["member@example.com", "friend@example.com"]
    LOG_LEVEL = "WARNING"
    WHEEL_SEED = "42"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.session.add_all([
            User(id=ADMIN_ID, auth_sub="auth|admin", email="admin@example.com", is_admin=True, is_whitelisted=True),
            User(id=MEMBER_ID, auth_sub="auth|member", email="member@example.com", is_whitelisted=True),
            User(id=FRIEND_ID, auth_sub="auth|friend", email="friend@example.com", is_whitelisted=True),
        ])
        db.session.commit()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def session(app):
    """db.session inside an app context, for service-level tests."""
    with app.app_context():
        yield db.session
        db.session.remove()


@pytest.fixture
def client(app):
    # no app context is held here so every request gets a fresh one
    return app.test_client()


def make_token(sub, email, expires_in=3600, **claims):
    payload = {"sub": sub, "email": email, "exp": int(time.time()) + expires_in, **claims}
    return jwt.encode({"alg": "HS256"}, payload, JWT_SECRET).decode("utf-8")


def auth_header(sub, email, **claims):
    return {"Authorization": f"Bearer {make_token(sub, email, **claims)}"}


@pytest.fixture
def admin_headers():
    return auth_header("auth|admin", "admin@example.com")


@pytest.fixture
def member_headers():
    return auth_header("auth|member", "member@example.com")


@pytest.fixture
def outsider_headers():
    return auth_header("auth|stranger", "stranger@example.com")
