# restaurant_wheel/utils/validation.py
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from pydantic import AnyUrl, EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from ..models.restaurant import RESTAURANT_STATES

_url_adapter = TypeAdapter(AnyUrl)
_email_adapter = TypeAdapter(EmailStr)


def utcnow() -> datetime:
    # naive UTC, matching the database's CURRENT_TIMESTAMP
    return datetime.now(timezone.utc).replace(tzinfo=None)


def sanitize_string(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def is_valid_url(value: str) -> bool:
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def is_valid_email(value: Any) -> bool:
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def is_valid_restaurant_state(state: Any) -> bool:
    return state in RESTAURANT_STATES


def is_valid_rating(rating: Any) -> bool:
    """
    Ratings are any positive, finite number. The frontend caps its input at
    10 but that is a presentation choice.
    """
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        return False
    try:
        return math.isfinite(rating) and rating > 0
    except OverflowError:
        # ints too large for a float
        return False


def optional_link(value: Any, label: str) -> str | None:
    """Normalize a menu/photo link; empty means cleared."""
    link = sanitize_string(value)
    if not link:
        return None
    if not is_valid_url(link):
        raise ValidationError(f"Invalid {label} link URL")
    return link


def parse_datetime(value: Any, field: str) -> datetime | None:
    """Parse an ISO-8601 string (or None) into a naive UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"Invalid {field} datetime")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
