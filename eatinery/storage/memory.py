from __future__ import annotations

import itertools
import logging
import threading

from .base import DuplicateEntryError, Storage, UnknownRestaurantError
from .models import (
    MenuItem,
    MenuItemCreate,
    Restaurant,
    RestaurantCreate,
    User,
    UserCreate,
    WalkingDirection,
    WalkingDirectionCreate,
)

logger = logging.getLogger(__name__)


class MemStorage(Storage):
    """Dict-backed store. Insertion order doubles as id order."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: dict[int, User] = {}
        self._restaurants: dict[int, Restaurant] = {}
        self._menu_items: dict[int, MenuItem] = {}
        self._directions: dict[int, WalkingDirection] = {}
        self._user_ids = itertools.count(1)
        self._restaurant_ids = itertools.count(1)
        self._menu_item_ids = itertools.count(1)
        self._direction_ids = itertools.count(1)

    # ── Users ────────────────────────────────────────────────────────────

    def get_user(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        for user in list(self._users.values()):
            if user.username == username:
                return user
        return None

    def create_user(self, data: UserCreate) -> User:
        with self._lock:
            if self.get_user_by_username(data.username) is not None:
                raise DuplicateEntryError(f"Username {data.username!r} already exists")
            user = User(**data.model_dump(), id=next(self._user_ids))
            self._users[user.id] = user
        return user

    # ── Restaurants ──────────────────────────────────────────────────────

    def list_restaurants(
        self,
        cuisine_type: str | None = None,
        is_hpb_healthy: bool | None = None,
    ) -> list[Restaurant]:
        restaurants = list(self._restaurants.values())
        if cuisine_type is not None:
            restaurants = [r for r in restaurants if r.cuisine_type == cuisine_type]
        if is_hpb_healthy is not None:
            restaurants = [r for r in restaurants if r.is_hpb_healthy == is_hpb_healthy]
        return restaurants

    def get_restaurant(self, restaurant_id: int) -> Restaurant | None:
        return self._restaurants.get(restaurant_id)

    def create_restaurant(self, data: RestaurantCreate) -> Restaurant:
        with self._lock:
            restaurant = Restaurant(**data.model_dump(), id=next(self._restaurant_ids))
            self._restaurants[restaurant.id] = restaurant
        logger.debug("Created restaurant %d (%s)", restaurant.id, restaurant.name)
        return restaurant

    # ── Menu items ───────────────────────────────────────────────────────

    def list_menu_items(
        self,
        restaurant_id: int,
        calorie_limit: float | None = None,
    ) -> list[MenuItem]:
        items = [i for i in list(self._menu_items.values()) if i.restaurant_id == restaurant_id]
        if calorie_limit is not None:
            items = [i for i in items if i.calories <= calorie_limit]
        return items

    def get_menu_item(self, item_id: int) -> MenuItem | None:
        return self._menu_items.get(item_id)

    def create_menu_item(self, data: MenuItemCreate) -> MenuItem:
        with self._lock:
            if data.restaurant_id not in self._restaurants:
                raise UnknownRestaurantError(data.restaurant_id)
            item = MenuItem(**data.model_dump(), id=next(self._menu_item_ids))
            self._menu_items[item.id] = item
        return item

    # ── Walking directions ───────────────────────────────────────────────

    def get_walking_directions(self, restaurant_id: int) -> WalkingDirection | None:
        for direction in list(self._directions.values()):
            if direction.restaurant_id == restaurant_id:
                return direction
        return None

    def create_walking_directions(self, data: WalkingDirectionCreate) -> WalkingDirection:
        with self._lock:
            if data.restaurant_id not in self._restaurants:
                raise UnknownRestaurantError(data.restaurant_id)
            if self.get_walking_directions(data.restaurant_id) is not None:
                raise DuplicateEntryError(
                    f"Restaurant {data.restaurant_id} already has walking directions"
                )
            direction = WalkingDirection(**data.model_dump(), id=next(self._direction_ids))
            self._directions[direction.id] = direction
        return direction
