from .rating_service import RatingService
from .restaurant_service import RestaurantService
from .statistics_service import StatisticsService
from .user_service import UserService
from .wheel import make_rng, spin

__all__ = ["RatingService", "RestaurantService", "StatisticsService", "UserService", "make_rng", "spin"]
