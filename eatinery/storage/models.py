from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

from ..geo import CalorieClass, calorie_class


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )


# ── Users ────────────────────────────────────────────────────────────────


class UserCreate(CamelModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class User(UserCreate):
    id: int


class UserOut(CamelModel):
    id: int
    username: str


# ── Restaurants ──────────────────────────────────────────────────────────


class RestaurantCreate(CamelModel):
    name: str = Field(..., min_length=1)
    cuisine_type: str = Field(..., min_length=1)
    location: str
    latitude: float
    longitude: float
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    is_hpb_healthy: bool = False
    image_url: str | None = None
    opening_hours: str | None = None
    address: str | None = None
    distance_in_meters: int | None = Field(default=None, ge=0)
    walk_time_minutes: int | None = Field(default=None, ge=0)


class Restaurant(RestaurantCreate):
    id: int


# ── Menu items ───────────────────────────────────────────────────────────


class MenuItemBase(CamelModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    calories: int = Field(..., ge=0)
    price: float | None = Field(default=None, ge=0.0)
    protein: int | None = Field(default=None, ge=0)
    carbs: int | None = Field(default=None, ge=0)
    fat: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    is_healthy: bool = False
    tags: list[str] = Field(default_factory=list)


class MenuItemCreate(MenuItemBase):
    restaurant_id: int


class MenuItem(MenuItemCreate):
    id: int

    @computed_field(alias="calorieClass")
    @property
    def calorie_class(self) -> CalorieClass:
        return calorie_class(self.calories)


# ── Walking directions ───────────────────────────────────────────────────


class DirectionStep(CamelModel):
    step_number: int = Field(..., ge=1)
    instruction: str = Field(..., min_length=1)
    distance_meters: int = Field(..., ge=0)
    time_minutes: int = Field(..., ge=0)


class WalkingDirectionBase(CamelModel):
    steps: list[DirectionStep] = Field(..., min_length=1)
    total_distance_meters: int = Field(..., ge=0)
    total_time_minutes: int = Field(..., ge=0)
    calories_burned: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _totals_match_steps(self) -> WalkingDirectionBase:
        step_distance = sum(s.distance_meters for s in self.steps)
        step_time = sum(s.time_minutes for s in self.steps)
        if self.total_distance_meters != step_distance:
            raise ValueError(
                f"totalDistanceMeters ({self.total_distance_meters}) must equal "
                f"the sum of step distances ({step_distance})"
            )
        if self.total_time_minutes != step_time:
            raise ValueError(
                f"totalTimeMinutes ({self.total_time_minutes}) must equal "
                f"the sum of step times ({step_time})"
            )
        return self


class WalkingDirectionCreate(WalkingDirectionBase):
    restaurant_id: int


class WalkingDirection(WalkingDirectionCreate):
    id: int
