# restaurant_wheel/services/restaurant_service.py
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, or_

from ..errors import NotFoundError, StateError, ValidationError
from ..models.restaurant import Restaurant
from ..utils.validation import (
    is_valid_restaurant_state,
    optional_link,
    parse_bool,
    parse_datetime,
    sanitize_string,
    utcnow,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "address",
    "is_fast_food",
    "menu_link",
    "photo_link",
    "state",
    "visited_at",
    "reservation_datetime",
)

SORT_ORDERS = ("date", "rating", "name")


class RestaurantService:
    """
    Restaurant lifecycle: nomination, approval, wheel confirmation and visits.

    pending -> active -> upcoming -> visited, with pending -> (deleted) on
    rejection. The named transitions check the current state; ``update`` lets
    an admin set any state directly.
    """

    def __init__(self, session):
        self.session = session

    ###########
    # QUERIES
    ###########

    def get(self, restaurant_id: int) -> Restaurant | None:
        return self.session.get(Restaurant, restaurant_id)

    def get_or_404(self, restaurant_id: int) -> Restaurant:
        restaurant = self.get(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def list_restaurants(
        self,
        state: str | None = None,
        nominated_by: int | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> list[Restaurant]:
        query = self.session.query(Restaurant)

        if state:
            if not is_valid_restaurant_state(state):
                raise ValidationError("Invalid restaurant state")
            query = query.filter(Restaurant.state == state)

        if nominated_by is not None:
            query = query.filter(Restaurant.nominated_by_user_id == nominated_by)

        search = sanitize_string(search).lower()
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    func.lower(Restaurant.name).like(pattern),
                    func.lower(Restaurant.address).like(pattern),
                )
            )

        if sort and sort not in SORT_ORDERS:
            raise ValidationError("Invalid sort order")

        if sort == "name":
            query = query.order_by(func.lower(Restaurant.name).asc(), Restaurant.id.asc())
        elif sort == "rating":
            query = query.order_by(Restaurant.average_rating.desc(), Restaurant.name.asc())
        else:
            query = query.order_by(Restaurant.created_at.desc(), Restaurant.id.desc())

        return query.all()

    def list_active(self, exclude_fast_food: bool = False) -> list[Restaurant]:
        """The wheel's candidate set."""
        query = self.session.query(Restaurant).filter(Restaurant.state == "active")
        if exclude_fast_food:
            query = query.filter(Restaurant.is_fast_food.is_(False))
        return query.order_by(Restaurant.name.asc(), Restaurant.id.asc()).all()

    #############
    # NOMINATION
    #############

    def nominate(
        self,
        name: Any,
        address: Any,
        is_fast_food: bool,
        nominator_id: int,
        admin_id: int | None = None,
        menu_link: Any = None,
        photo_link: Any = None,
    ) -> Restaurant:
        name = sanitize_string(name)
        address = sanitize_string(address)
        if not name or not address:
            raise ValidationError("Name and address are required")

        restaurant = Restaurant(
            name=name,
            address=address,
            is_fast_food=bool(is_fast_food),
            menu_link=optional_link(menu_link, "menu"),
            photo_link=optional_link(photo_link, "photo"),
            nominated_by_user_id=nominator_id,
            created_by_admin_id=admin_id,
            state="pending",
            average_rating=0,
        )
        self.session.add(restaurant)
        self.session.commit()

        logger.info("Restaurant %s nominated by user %s", restaurant.id, nominator_id)
        return restaurant

    ##############
    # TRANSITIONS
    ##############

    def update(self, restaurant_id: int, fields: dict[str, Any]) -> Restaurant:
        restaurant = self.get_or_404(restaurant_id)
        changed = False

        if "name" in fields:
            restaurant.name = sanitize_string(fields["name"])
            changed = True

        if "address" in fields:
            restaurant.address = sanitize_string(fields["address"])
            changed = True

        if not restaurant.name or not restaurant.address:
            self.session.rollback()
            raise ValidationError("Name and address are required")

        if "is_fast_food" in fields:
            restaurant.is_fast_food = parse_bool(fields["is_fast_food"])
            changed = True

        try:
            if "menu_link" in fields:
                restaurant.menu_link = optional_link(fields["menu_link"], "menu")
                changed = True

            if "photo_link" in fields:
                restaurant.photo_link = optional_link(fields["photo_link"], "photo")
                changed = True

            if "state" in fields:
                state = fields["state"]
                if not is_valid_restaurant_state(state):
                    raise ValidationError("Invalid restaurant state")
                restaurant.state = state
                if state == "visited" and "visited_at" not in fields:
                    restaurant.visited_at = utcnow()
                changed = True

            if "visited_at" in fields:
                restaurant.visited_at = parse_datetime(fields["visited_at"], "visited_at")
                changed = True

            if "reservation_datetime" in fields:
                restaurant.reservation_datetime = parse_datetime(
                    fields["reservation_datetime"], "reservation_datetime"
                )
                changed = True
        except ValidationError:
            self.session.rollback()
            raise

        if not changed:
            return restaurant

        restaurant.updated_at = utcnow()
        self.session.commit()
        logger.info("Restaurant %s updated (%s)", restaurant_id, ", ".join(sorted(fields)))
        return restaurant

    def approve(self, restaurant_id: int) -> Restaurant:
        return self.update(restaurant_id, {"state": "active"})

    def reject(self, restaurant_id: int) -> None:
        restaurant = self.get_or_404(restaurant_id)
        if restaurant.state != "pending":
            raise StateError("Only pending restaurants can be rejected")
        self.delete(restaurant_id)

    def confirm_upcoming(self, restaurant_id: int, reservation_datetime: Any = None) -> Restaurant:
        """Commit a wheel pick. The target must still be active."""
        restaurant = self.get_or_404(restaurant_id)
        if restaurant.state != "active":
            raise StateError("Only active restaurants can be confirmed as upcoming")

        fields: dict[str, Any] = {"state": "upcoming"}
        if reservation_datetime is not None:
            fields["reservation_datetime"] = reservation_datetime
        return self.update(restaurant_id, fields)

    def mark_visited(self, restaurant_id: int) -> Restaurant:
        restaurant = self.get_or_404(restaurant_id)
        if restaurant.state != "upcoming":
            raise StateError("Only upcoming restaurants can be marked as visited")
        return self.update(restaurant_id, {"state": "visited"})

    def delete(self, restaurant_id: int) -> None:
        restaurant = self.get_or_404(restaurant_id)
        self.session.delete(restaurant)
        self.session.commit()
        logger.info("Restaurant %s deleted", restaurant_id)
