from __future__ import annotations

from abc import ABC, abstractmethod

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


class StorageError(Exception):
    """The backing store failed to complete an operation."""


class DuplicateEntryError(StorageError):
    """A uniqueness constraint (username, one direction set per restaurant) was violated."""


class UnknownRestaurantError(StorageError):
    def __init__(self, restaurant_id: int) -> None:
        super().__init__(f"Restaurant {restaurant_id} does not exist")
        self.restaurant_id = restaurant_id


class Storage(ABC):
    """
    Contract shared by every data store.

    Implementations must return identical results for identical calls:
    lists come back in id order, filters are exact matches, and ids are
    assigned per entity type starting at 1 and never reused.
    """

    # Users

    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> User:
        """Raises ``DuplicateEntryError`` if the username is taken."""

    # Restaurants

    @abstractmethod
    def list_restaurants(
        self,
        cuisine_type: str | None = None,
        is_hpb_healthy: bool | None = None,
    ) -> list[Restaurant]: ...

    @abstractmethod
    def get_restaurant(self, restaurant_id: int) -> Restaurant | None: ...

    @abstractmethod
    def create_restaurant(self, data: RestaurantCreate) -> Restaurant: ...

    # Menu items

    @abstractmethod
    def list_menu_items(
        self,
        restaurant_id: int,
        calorie_limit: float | None = None,
    ) -> list[MenuItem]: ...

    @abstractmethod
    def get_menu_item(self, item_id: int) -> MenuItem | None: ...

    @abstractmethod
    def create_menu_item(self, data: MenuItemCreate) -> MenuItem:
        """Raises ``UnknownRestaurantError`` for a dangling ``restaurant_id``."""

    # Walking directions

    @abstractmethod
    def get_walking_directions(self, restaurant_id: int) -> WalkingDirection | None: ...

    @abstractmethod
    def create_walking_directions(self, data: WalkingDirectionCreate) -> WalkingDirection:
        """Raises ``UnknownRestaurantError`` or ``DuplicateEntryError``."""

    def cuisine_types(self) -> list[str]:
        return sorted({r.cuisine_type for r in self.list_restaurants()})
