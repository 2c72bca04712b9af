# restaurant_wheel/services/user_service.py
from __future__ import annotations

import logging
from typing import Any, Iterable

from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..models.user import User
from ..utils.validation import is_valid_email, sanitize_string, utcnow

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, session, admin_emails: Iterable[str] = (), whitelisted_emails: Iterable[str] = ()):
        self.session = session
        self.admin_emails = {e.lower() for e in admin_emails}
        # admins are always allowed in
        self.whitelisted_emails = {e.lower() for e in whitelisted_emails} | self.admin_emails

    def resolve_user(self, claims: dict[str, Any]) -> User:
        """
        Map verified token claims to a local user, creating one on first
        sign-in. A provisional user created by an admin is claimed by email;
        an email already bound to another subject is refused.
        """
        sub = claims.get("sub")
        if not sub:
            raise ValidationError("Token has no subject")

        email = sanitize_string(claims.get("email")).lower()

        user = self.session.query(User).filter(User.auth_sub == sub).first()
        if user is None and email:
            user = self.session.query(User).filter(User.email == email).first()
            if user is not None and user.auth_sub is not None:
                # only unclaimed rows can be bound to a new subject
                logger.warning("Sign-in for %s rejected: account linked to another subject", email)
                raise ForbiddenError("Forbidden: Account already linked to another sign-in")
            if user is not None:
                user.auth_sub = sub
                user.is_provisional = False
                logger.info("User %s claimed by token subject", user.id)

        if user is None:
            user = User(
                auth_sub=sub,
                email=email or f"{sub}@users.invalid",
                name=claims.get("name"),
                is_admin=False,
                is_whitelisted=False,
            )
            self.session.add(user)
            logger.info("New user signed in: %s", user.email)

        if user.email in self.admin_emails:
            user.is_admin = True
        if user.email in self.whitelisted_emails:
            user.is_whitelisted = True

        if self.session.dirty or self.session.new:
            self.session.commit()
        return user

    def list_users(self) -> list[User]:
        return self.session.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def update_user(self, user_id: int, fields: dict[str, Any]) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")

        if "name" not in fields and "email" not in fields:
            raise ValidationError("No fields to update")

        if "name" in fields:
            user.name = sanitize_string(fields["name"]) or None

        if "email" in fields:
            email = sanitize_string(fields["email"]).lower()
            if not is_valid_email(email):
                self.session.rollback()
                raise ValidationError("Invalid email format")
            clash = self.session.query(User).filter(User.email == email, User.id != user_id).first()
            if clash is not None:
                self.session.rollback()
                raise ValidationError("User with this email already exists")
            user.email = email

        user.updated_at = utcnow()
        self.session.commit()
        return user

    def create_provisional(self, email: Any, name: Any = None) -> User:
        """Pre-register and whitelist someone who has not signed in yet."""
        email = sanitize_string(email).lower()
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

        if self.session.query(User).filter(User.email == email).first() is not None:
            raise ValidationError("User with this email already exists")

        user = User(
            email=email,
            name=sanitize_string(name) or None,
            is_admin=email in self.admin_emails,
            is_whitelisted=True,
            is_provisional=True,
        )
        self.session.add(user)
        self.session.commit()
        logger.info("Provisional user %s created", email)
        return user

    def create_admin(self, email: Any, name: Any = None) -> User:
        email = sanitize_string(email).lower()
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

        user = self.session.query(User).filter(User.email == email).first()
        if user is None:
            user = User(email=email, is_provisional=True)
            self.session.add(user)
        if name:
            user.name = sanitize_string(name)
        user.is_admin = True
        user.is_whitelisted = True
        self.session.commit()
        return user
