from __future__ import annotations

import pytest
from pydantic import ValidationError

from eatinery.storage import DuplicateEntryError, UnknownRestaurantError, build_storage
from eatinery.storage.config import StorageConfig
from eatinery.storage.models import (
    DirectionStep,
    MenuItemCreate,
    RestaurantCreate,
    UserCreate,
    WalkingDirectionCreate,
)


def _restaurant(name: str = "Tonkotsu King", **overrides) -> RestaurantCreate:
    fields = {
        "name": name,
        "cuisine_type": "Japanese",
        "location": "Westgate",
        "latitude": 1.3343,
        "longitude": 103.7428,
        "rating": 4.2,
        "is_hpb_healthy": False,
    }
    fields.update(overrides)
    return RestaurantCreate(**fields)


def _steps() -> list[DirectionStep]:
    return [
        DirectionStep(step_number=1, instruction="Exit the MRT", distance_meters=80, time_minutes=1),
        DirectionStep(step_number=2, instruction="Cross the bridge", distance_meters=120, time_minutes=2),
    ]


# ── Identifiers ──────────────────────────────────────────────────────────


def test_ids_start_at_one(empty_store):
    first = empty_store.create_restaurant(_restaurant("A"))
    assert first.id == 1


def test_sequential_creations_get_increasing_ids(empty_store):
    a = empty_store.create_restaurant(_restaurant("A"))
    b = empty_store.create_restaurant(_restaurant("B"))
    c = empty_store.create_restaurant(_restaurant("C"))
    assert a.id < b.id < c.id
    assert len({a.id, b.id, c.id}) == 3


def test_ids_are_counted_per_entity_type(empty_store):
    restaurant = empty_store.create_restaurant(_restaurant())
    user = empty_store.create_user(UserCreate(username="mei", password="hash"))
    item = empty_store.create_menu_item(MenuItemCreate(
        restaurant_id=restaurant.id, name="Shoyu Ramen", calories=520,
    ))
    assert restaurant.id == user.id == item.id == 1


# ── Restaurants ──────────────────────────────────────────────────────────


def test_get_restaurant(store):
    restaurant = store.get_restaurant(1)
    assert restaurant.name == "Seoul Garden"
    assert restaurant.is_hpb_healthy is True
    assert restaurant.distance_in_meters == 650


def test_get_unknown_restaurant_returns_none(store):
    assert store.get_restaurant(999) is None


def test_list_restaurants_in_id_order(store):
    store.create_restaurant(_restaurant())
    names = [r.name for r in store.list_restaurants()]
    assert names == ["Seoul Garden", "K-Grill BBQ", "Tonkotsu King"]


def test_list_restaurants_by_cuisine(store):
    store.create_restaurant(_restaurant())
    assert [r.name for r in store.list_restaurants(cuisine_type="Japanese")] == ["Tonkotsu King"]
    assert len(store.list_restaurants(cuisine_type="Korean")) == 2


def test_list_restaurants_cuisine_is_exact_match(store):
    assert store.list_restaurants(cuisine_type="korean") == []
    assert store.list_restaurants(cuisine_type="Kor") == []


def test_list_restaurants_by_health_flag(store):
    assert [r.name for r in store.list_restaurants(is_hpb_healthy=True)] == ["Seoul Garden"]
    assert [r.name for r in store.list_restaurants(is_hpb_healthy=False)] == ["K-Grill BBQ"]


def test_list_restaurants_combined_filters(store):
    assert store.list_restaurants(cuisine_type="Korean", is_hpb_healthy=False)[0].name == "K-Grill BBQ"


def test_cuisine_types(store):
    store.create_restaurant(_restaurant())
    assert store.cuisine_types() == ["Japanese", "Korean"]


# ── Menu items ───────────────────────────────────────────────────────────


def test_list_menu_items(store):
    names = [i.name for i in store.list_menu_items(1)]
    assert names == ["Veggie Bibimbap", "Soft Tofu Soup", "Bulgogi Lettuce Wraps"]


def test_list_menu_items_under_limit(store):
    items = store.list_menu_items(1, calorie_limit=420)
    assert [i.calories for i in items] == [420, 310]


def test_list_menu_items_unknown_restaurant_is_empty(store):
    assert store.list_menu_items(999) == []


def test_menu_item_fields_survive_storage(store):
    item = store.get_menu_item(1)
    assert item.tags == ["High protein", "Vegetarian"]
    assert item.price == pytest.approx(12.90)
    assert item.restaurant_id == 1
    assert item.calorie_class.value == "medium"


def test_create_menu_item_for_unknown_restaurant(store):
    with pytest.raises(UnknownRestaurantError):
        store.create_menu_item(MenuItemCreate(restaurant_id=999, name="Ghost", calories=100))


# ── Walking directions ───────────────────────────────────────────────────


def test_get_walking_directions(store):
    directions = store.get_walking_directions(1)
    assert [s.step_number for s in directions.steps] == [1, 2, 3, 4]
    assert directions.total_distance_meters == 650
    assert directions.total_time_minutes == 8
    assert directions.calories_burned == 45


def test_get_walking_directions_missing(store):
    assert store.get_walking_directions(999) is None


def test_walking_directions_are_one_per_restaurant(store):
    with pytest.raises(DuplicateEntryError):
        store.create_walking_directions(WalkingDirectionCreate(
            restaurant_id=1, steps=_steps(),
            total_distance_meters=200, total_time_minutes=3, calories_burned=13,
        ))


def test_walking_directions_for_unknown_restaurant(store):
    with pytest.raises(UnknownRestaurantError):
        store.create_walking_directions(WalkingDirectionCreate(
            restaurant_id=999, steps=_steps(),
            total_distance_meters=200, total_time_minutes=3, calories_burned=13,
        ))


def test_walking_direction_totals_must_match_steps():
    with pytest.raises(ValidationError):
        WalkingDirectionCreate(
            restaurant_id=1, steps=_steps(),
            total_distance_meters=999, total_time_minutes=3, calories_burned=13,
        )


# ── Users ────────────────────────────────────────────────────────────────


def test_create_and_lookup_user(empty_store):
    user = empty_store.create_user(UserCreate(username="mei", password="hash"))
    assert empty_store.get_user(user.id) == user
    assert empty_store.get_user_by_username("mei") == user
    assert empty_store.get_user_by_username("nobody") is None


def test_usernames_are_unique(empty_store):
    empty_store.create_user(UserCreate(username="mei", password="a"))
    with pytest.raises(DuplicateEntryError):
        empty_store.create_user(UserCreate(username="mei", password="b"))


def test_failed_user_creation_does_not_break_the_store(empty_store):
    empty_store.create_user(UserCreate(username="mei", password="a"))
    with pytest.raises(DuplicateEntryError):
        empty_store.create_user(UserCreate(username="mei", password="b"))
    other = empty_store.create_user(UserCreate(username="jun", password="c"))
    assert empty_store.get_user(other.id).username == "jun"


# ── Factory ──────────────────────────────────────────────────────────────


def test_build_storage_rejects_unknown_backend():
    with pytest.raises(ValueError):
        build_storage(StorageConfig(backend="mongo"))


def test_build_sql_storage_is_seeded_once(tmp_path):
    config = StorageConfig(backend="sql", database_url=f"sqlite:///{tmp_path / 'eatinery.db'}")
    first = build_storage(config)
    first.dispose()
    second = build_storage(config)
    assert len(second.list_restaurants()) == 2
    second.dispose()
