# restaurant_wheel/utils/auth.py
import logging
from functools import wraps

from flask import current_app, g, jsonify

from .. import require_auth
from ..errors import WheelError
from ..extensions import db
from ..services.user_service import UserService

logger = logging.getLogger(__name__)


def user_service() -> UserService:
    return UserService(
        db.session,
        admin_emails=current_app.config.get("ADMIN_EMAILS", []),
        whitelisted_emails=current_app.config.get("WHITELISTED_EMAILS", []),
    )


def current_user():
    """
    The local User for the request's bearer token.
    Only valid inside a view protected by ``require_auth``.
    """
    if "current_user" not in g:
        g.current_user = user_service().resolve_user(dict(g.authlib_server_oauth2_token))
    return g.current_user


def login_required(f):
    """Valid token and a whitelisted account."""
    @wraps(f)
    @require_auth(None)
    def decorated_function(*args, **kwargs):
        try:
            user = current_user()
        except WheelError as e:
            return jsonify({"error": e.message}), e.status_code
        if not user.is_whitelisted and not user.is_admin:
            logger.debug("User %s is not whitelisted", user.id)
            return jsonify({"error": "Forbidden: Email not whitelisted"}), 403
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not current_user().is_admin:
            logger.debug("User %s is not an admin", current_user().id)
            return jsonify({"error": "Forbidden: Admin access required"}), 403
        return f(*args, **kwargs)
    return decorated_function
