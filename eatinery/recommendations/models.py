from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict, Field, StrictBool, StrictFloat

from ..storage.models import CamelModel, MenuItem, Restaurant

MIN_CALORIE_LIMIT = 500
MAX_CALORIE_LIMIT = 3000


class MealType(str, Enum):
    any = "Any Meal"
    breakfast = "Breakfast"
    lunch = "Lunch"
    dinner = "Dinner"


class CalorieFilter(CamelModel):
    model_config = ConfigDict(extra="forbid")

    limit: StrictFloat = Field(
        ...,
        ge=MIN_CALORIE_LIMIT,
        le=MAX_CALORIE_LIMIT,
        description="Upper bound on menu item calories",
    )
    cuisine_type: str | None = Field(default=None, description="Exact cuisine match, e.g. Korean")
    is_hpb_healthy: StrictBool | None = None
    meal_type: MealType | None = Field(
        default=None,
        description="Accepted from the client; menu items carry no meal type so it does not narrow results",
    )


class RestaurantWithMenu(Restaurant):
    recommended_menu_items: list[MenuItem]


class NearbyRestaurant(Restaurant):
    distance_meters: int
    walking_minutes: int
    calories_burned: int
