"""Tests for the restaurant lifecycle."""

from datetime import datetime

import pytest

from conftest import ADMIN_ID, MEMBER_ID
from restaurant_wheel.errors import NotFoundError, StateError, ValidationError
from restaurant_wheel.models import Restaurant
from restaurant_wheel.services import RestaurantService


@pytest.fixture
def service(session):
    return RestaurantService(session)


def _restaurant(service, name="Luigi's", state=None, is_fast_food=False):
    restaurant = service.nominate(name, "123 Main St", is_fast_food, MEMBER_ID)
    if state and state != "pending":
        restaurant = service.update(restaurant.id, {"state": state})
    return restaurant


class TestNominate:
    def test_creates_pending_row(self, service):
        """A nomination starts pending with no rating."""
        restaurant = service.nominate("Luigi's", "123 Main St", False, MEMBER_ID)

        assert restaurant.id is not None
        assert restaurant.state == "pending"
        assert restaurant.average_rating == 0
        assert restaurant.nominated_by_user_id == MEMBER_ID
        assert restaurant.created_by_admin_id is None
        assert restaurant.created_at is not None

    def test_trims_name_and_address(self, service):
        restaurant = service.nominate("  Luigi's ", "\t123 Main St  ", True, MEMBER_ID)

        assert restaurant.name == "Luigi's"
        assert restaurant.address == "123 Main St"
        assert restaurant.is_fast_food is True

    @pytest.mark.parametrize("name,address", [("", "x"), ("x", ""), ("   ", "x"), (None, "x")])
    def test_blank_name_or_address_rejected(self, service, session, name, address):
        with pytest.raises(ValidationError, match="Name and address are required"):
            service.nominate(name, address, False, MEMBER_ID)

        assert session.query(Restaurant).count() == 0

    def test_admin_on_behalf_of_user(self, service):
        restaurant = service.nominate("Sushi Go", "1 Ocean Rd", False, MEMBER_ID, admin_id=ADMIN_ID)

        assert restaurant.nominated_by_user_id == MEMBER_ID
        assert restaurant.created_by_admin_id == ADMIN_ID

    def test_links_validated(self, service, session):
        with pytest.raises(ValidationError, match="Invalid menu link URL"):
            service.nominate("A", "B", False, MEMBER_ID, menu_link="not a url")

        assert session.query(Restaurant).count() == 0

        restaurant = service.nominate("A", "B", False, MEMBER_ID, menu_link="https://a.example/menu")
        assert restaurant.menu_link == "https://a.example/menu"


class TestTransitions:
    def test_approve_pending(self, service):
        restaurant = _restaurant(service)

        approved = service.approve(restaurant.id)

        assert approved.state == "active"

    def test_approve_missing(self, service):
        with pytest.raises(NotFoundError, match="Restaurant not found"):
            service.approve(999)

    def test_reject_pending_deletes(self, service):
        restaurant = _restaurant(service)
        restaurant_id = restaurant.id

        service.reject(restaurant_id)

        assert service.get(restaurant_id) is None

    def test_reject_active_fails_and_keeps_row(self, service):
        restaurant = _restaurant(service, state="active")

        with pytest.raises(StateError, match="Only pending restaurants can be rejected"):
            service.reject(restaurant.id)

        assert service.get(restaurant.id).state == "active"

    def test_confirm_upcoming_requires_active(self, service):
        restaurant = _restaurant(service)

        with pytest.raises(StateError, match="Only active restaurants"):
            service.confirm_upcoming(restaurant.id)

        assert service.get(restaurant.id).state == "pending"

    def test_confirm_upcoming_with_reservation(self, service):
        restaurant = _restaurant(service, state="active")

        upcoming = service.confirm_upcoming(restaurant.id, reservation_datetime="2026-11-01T19:30:00Z")

        assert upcoming.state == "upcoming"
        assert upcoming.reservation_datetime == datetime(2026, 11, 1, 19, 30)

    def test_mark_visited_from_upcoming(self, service):
        restaurant = _restaurant(service, state="upcoming")

        visited = service.mark_visited(restaurant.id)

        assert visited.state == "visited"
        assert visited.visited_at is not None

    @pytest.mark.parametrize("state", ["pending", "active", "visited"])
    def test_mark_visited_other_states_fail(self, service, state):
        restaurant = _restaurant(service, state=state)

        with pytest.raises(StateError, match="Only upcoming restaurants can be marked as visited"):
            service.mark_visited(restaurant.id)

        assert service.get(restaurant.id).state == state

    def test_delete_missing(self, service):
        with pytest.raises(NotFoundError, match="Restaurant not found"):
            service.delete(42)


class TestUpdate:
    def test_partial_update(self, service):
        restaurant = _restaurant(service)

        updated = service.update(restaurant.id, {"name": "Luigi's Trattoria", "is_fast_food": True})

        assert updated.name == "Luigi's Trattoria"
        assert updated.address == "123 Main St"
        assert updated.is_fast_food is True

    @pytest.mark.parametrize("value,expected", [("false", False), ("0", False), ("true", True), (False, False)])
    def test_fast_food_string_flags(self, service, value, expected):
        restaurant = _restaurant(service, is_fast_food=not expected)

        assert service.update(restaurant.id, {"is_fast_food": value}).is_fast_food is expected

    def test_invalid_state(self, service):
        restaurant = _restaurant(service)

        with pytest.raises(ValidationError, match="Invalid restaurant state"):
            service.update(restaurant.id, {"state": "closed"})

        assert service.get(restaurant.id).state == "pending"

    def test_invalid_photo_link_leaves_row_unchanged(self, service):
        restaurant = _restaurant(service)

        with pytest.raises(ValidationError, match="Invalid photo link URL"):
            service.update(restaurant.id, {"name": "Changed", "photo_link": "nope"})

        assert service.get(restaurant.id).name == "Luigi's"

    def test_empty_link_clears(self, service):
        restaurant = service.nominate("A", "B", False, MEMBER_ID, menu_link="https://a.example")

        assert service.update(restaurant.id, {"menu_link": ""}).menu_link is None

    def test_state_escape_hatch_sets_visited_at(self, service):
        restaurant = _restaurant(service)

        visited = service.update(restaurant.id, {"state": "visited"})

        assert visited.state == "visited"
        assert visited.visited_at is not None

    def test_explicit_visited_at_wins(self, service):
        restaurant = _restaurant(service)

        visited = service.update(restaurant.id, {"state": "visited", "visited_at": "2025-05-04T12:00:00"})

        assert visited.visited_at == datetime(2025, 5, 4, 12, 0)

    def test_bad_datetime(self, service):
        restaurant = _restaurant(service)

        with pytest.raises(ValidationError, match="Invalid visited_at datetime"):
            service.update(restaurant.id, {"visited_at": "yesterday"})

    def test_blank_name_rejected(self, service):
        restaurant = _restaurant(service)

        with pytest.raises(ValidationError, match="Name and address are required"):
            service.update(restaurant.id, {"name": "  "})

        assert service.get(restaurant.id).name == "Luigi's"

    def test_update_missing(self, service):
        with pytest.raises(NotFoundError):
            service.update(404, {"name": "x"})


class TestListing:
    def test_list_active_fast_food_filter(self, service):
        _restaurant(service, "Burger Barn", state="active", is_fast_food=True)
        _restaurant(service, "Luigi's", state="active")
        _restaurant(service, "Pending Place")

        everything = service.list_active(exclude_fast_food=False)
        no_fast_food = service.list_active(exclude_fast_food=True)

        assert {r.name for r in everything} == {"Burger Barn", "Luigi's"}
        assert [r.name for r in no_fast_food] == ["Luigi's"]
        assert all(not r.is_fast_food for r in no_fast_food)

    def test_filter_by_state(self, service):
        _restaurant(service, "One", state="active")
        _restaurant(service, "Two")

        assert [r.name for r in service.list_restaurants(state="pending")] == ["Two"]

    def test_invalid_state_filter(self, service):
        with pytest.raises(ValidationError, match="Invalid restaurant state"):
            service.list_restaurants(state="gone")

    def test_search_name_and_address_case_insensitive(self, service):
        service.nominate("Pizza Palace", "1 High St", False, MEMBER_ID)
        service.nominate("Taco Town", "9 PIZZA Lane", False, MEMBER_ID)
        service.nominate("Noodle Bar", "2 Low St", False, MEMBER_ID)

        found = service.list_restaurants(search="pizza", sort="name")

        assert [r.name for r in found] == ["Pizza Palace", "Taco Town"]

    def test_sort_by_rating(self, service):
        low = _restaurant(service, "Low", state="visited")
        high = _restaurant(service, "High", state="visited")
        service.session.get(Restaurant, low.id).average_rating = 3
        service.session.get(Restaurant, high.id).average_rating = 9
        service.session.commit()

        assert [r.name for r in service.list_restaurants(sort="rating")] == ["High", "Low"]

    def test_default_sort_newest_first(self, service):
        service.nominate("First", "a", False, MEMBER_ID)
        service.nominate("Second", "b", False, MEMBER_ID)

        assert [r.name for r in service.list_restaurants()] == ["Second", "First"]

    def test_invalid_sort(self, service):
        with pytest.raises(ValidationError, match="Invalid sort order"):
            service.list_restaurants(sort="random")

    def test_filter_by_nominator(self, service):
        service.nominate("Mine", "a", False, MEMBER_ID)
        service.nominate("Theirs", "b", False, ADMIN_ID)

        assert [r.name for r in service.list_restaurants(nominated_by=ADMIN_ID)] == ["Theirs"]
