from .restaurant import Restaurant, RESTAURANT_STATES
from .user import User
from .visit import Visit

__all__ = ["Restaurant", "RESTAURANT_STATES", "User", "Visit"]
