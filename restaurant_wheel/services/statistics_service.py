# restaurant_wheel/services/statistics_service.py
from __future__ import annotations

from sqlalchemy import case, desc, func

from ..models.restaurant import Restaurant
from ..models.user import User
from ..models.visit import Visit

TOP_LIMIT = 10


def _f(v) -> float:
    return float(v) if v is not None else 0.0


def _i(v) -> int:
    return int(v) if v is not None else 0


class StatisticsService:
    """Read-only aggregates over restaurants, visits and users."""

    def __init__(self, session):
        self.session = session

    def overall(self) -> dict:
        avg_rating, count = (
            self.session.query(func.avg(Restaurant.average_rating), func.count(Restaurant.id))
            .filter(Restaurant.state == "visited", Restaurant.average_rating > 0)
            .one()
        )
        return {
            "overall_average_rating": _f(avg_rating),
            "rated_restaurant_count": _i(count),
        }

    def get_statistics(self) -> dict:
        def state_count(state):
            return func.sum(case((Restaurant.state == state, 1), else_=0))

        total, pending, active, upcoming, visited, fast_food = self.session.query(
            func.count(Restaurant.id),
            state_count("pending"),
            state_count("active"),
            state_count("upcoming"),
            state_count("visited"),
            func.sum(case((Restaurant.is_fast_food.is_(True), 1), else_=0)),
        ).one()

        total_ratings, overall_avg, rated_count = (
            self.session.query(
                func.count(Visit.id),
                func.avg(Visit.rating),
                func.count(func.distinct(Visit.restaurant_id)),
            )
            .filter(Visit.rating.isnot(None))
            .one()
        )

        total_users, admins, provisional = self.session.query(
            func.count(User.id),
            func.sum(case((User.is_admin.is_(True), 1), else_=0)),
            func.sum(case((User.is_provisional.is_(True), 1), else_=0)),
        ).one()

        return {
            "totalRestaurants": _i(total),
            "pendingRestaurants": _i(pending),
            "activeRestaurants": _i(active),
            "upcomingRestaurants": _i(upcoming),
            "visitedRestaurants": _i(visited),
            "fastFoodCount": _i(fast_food),
            "nonFastFoodCount": _i(total) - _i(fast_food),
            "overallAverageRating": _f(overall_avg),
            "totalRatingsGiven": _i(total_ratings),
            "ratedRestaurantCount": _i(rated_count),
            "unratedRestaurantCount": max(_i(visited) - _i(rated_count), 0),
            "totalUsers": _i(total_users),
            "adminCount": _i(admins),
            "provisionalCount": _i(provisional),
            "topRatedRestaurants": self._restaurant_leaderboard(limit=TOP_LIMIT, with_state=False),
            "mostActiveNominators": self._top_nominators(),
            "mostActiveRaters": self._top_raters(),
            "restaurantLeaderboard": self._restaurant_leaderboard(),
            "userRatingAverages": self._user_rating_averages(),
            "nominatorRestaurantAverages": self._nominator_restaurant_averages(),
        }

    ##############
    # LEADERBOARDS
    ##############

    def _restaurant_leaderboard(self, limit: int | None = None, with_state: bool = True) -> list[dict]:
        avg_rating = func.avg(Visit.rating).label("average_rating")
        rating_count = func.count(Visit.rating).label("rating_count")
        query = (
            self.session.query(Restaurant.id, Restaurant.name, Restaurant.state, avg_rating, rating_count)
            .join(Visit, Visit.restaurant_id == Restaurant.id)
            .filter(Visit.rating.isnot(None))
            .group_by(Restaurant.id, Restaurant.name, Restaurant.state)
            .order_by(desc("average_rating"), desc("rating_count"), Restaurant.id.asc())
        )
        if limit:
            query = query.limit(limit)

        out = []
        for r in query.all():
            row = {
                "id": r.id,
                "name": r.name,
                "average_rating": _f(r.average_rating),
                "rating_count": _i(r.rating_count),
            }
            if with_state:
                row["state"] = r.state
            out.append(row)
        return out

    def _top_nominators(self) -> list[dict]:
        nomination_count = func.count(Restaurant.id).label("nomination_count")
        rows = (
            self.session.query(User.id, User.name, User.email, nomination_count)
            .join(Restaurant, Restaurant.nominated_by_user_id == User.id)
            .group_by(User.id, User.name, User.email)
            .order_by(desc("nomination_count"), User.id.asc())
            .limit(TOP_LIMIT)
            .all()
        )
        return [
            {"id": r.id, "name": r.name, "email": r.email, "nomination_count": _i(r.nomination_count)}
            for r in rows
        ]

    def _top_raters(self) -> list[dict]:
        return [
            {"id": r["id"], "name": r["name"], "email": r["email"], "rating_count": r["rating_count"]}
            for r in self._user_rating_averages(order_by_count=True)[:TOP_LIMIT]
        ]

    def _user_rating_averages(self, order_by_count: bool = False) -> list[dict]:
        avg_rating = func.avg(Visit.rating).label("average_rating")
        rating_count = func.count(Visit.rating).label("rating_count")
        query = (
            self.session.query(User.id, User.name, User.email, avg_rating, rating_count)
            .join(Visit, Visit.user_id == User.id)
            .filter(Visit.rating.isnot(None))
            .group_by(User.id, User.name, User.email)
        )
        if order_by_count:
            query = query.order_by(desc("rating_count"), User.id.asc())
        else:
            query = query.order_by(desc("average_rating"), desc("rating_count"), User.id.asc())

        return [
            {
                "id": r.id,
                "name": r.name,
                "email": r.email,
                "average_rating": _f(r.average_rating),
                "rating_count": _i(r.rating_count),
            }
            for r in query.all()
        ]

    def _nominator_restaurant_averages(self) -> list[dict]:
        """Average rating of each user's nominations that have been visited and rated."""
        restaurant_ratings = (
            self.session.query(
                Visit.restaurant_id.label("restaurant_id"),
                func.avg(Visit.rating).label("average_rating"),
            )
            .filter(Visit.rating.isnot(None))
            .group_by(Visit.restaurant_id)
            .subquery()
        )

        avg_rating = func.avg(restaurant_ratings.c.average_rating).label("average_rating")
        nominated = func.count(func.distinct(Restaurant.id)).label("nominated_count")
        visited = func.count(func.distinct(restaurant_ratings.c.restaurant_id)).label("visited_nominated_count")

        rows = (
            self.session.query(User.id, User.name, User.email, avg_rating, nominated, visited)
            .join(Restaurant, Restaurant.nominated_by_user_id == User.id)
            .outerjoin(
                restaurant_ratings,
                (restaurant_ratings.c.restaurant_id == Restaurant.id) & (Restaurant.state == "visited"),
            )
            .group_by(User.id, User.name, User.email)
            .having(func.count(func.distinct(restaurant_ratings.c.restaurant_id)) > 0)
            .order_by(desc("average_rating"), User.id.asc())
            .all()
        )
        return [
            {
                "id": r.id,
                "name": r.name,
                "email": r.email,
                "average_rating": _f(r.average_rating),
                "nominated_count": _i(r.nominated_count),
                "visited_nominated_count": _i(r.visited_nominated_count),
            }
            for r in rows
        ]
