from __future__ import annotations

import math
from enum import Enum

EARTH_RADIUS_M = 6371e3
WALKING_SPEED_M_PER_MIN = 83  # ~5 km/h
CALORIES_PER_KM = 65


class CalorieClass(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


def _round_half_up(value: float) -> int:
    # Matches the client's Math.round, unlike Python's banker's rounding.
    return int(math.floor(value + 0.5))


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> int:
    """Great-circle distance in whole meters between two points given in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Out-of-range degrees can push a outside [0, 1].
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return _round_half_up(EARTH_RADIUS_M * c)


def walking_time(distance_m: float) -> int:
    """Estimated walking time in minutes."""
    return _round_half_up(distance_m / WALKING_SPEED_M_PER_MIN)


def calories_burned(distance_m: float) -> int:
    """Estimated kcal burned walking ``distance_m`` meters."""
    return _round_half_up((distance_m / 1000) * CALORIES_PER_KM)


def calorie_class(calories: float) -> CalorieClass:
    if calories <= 400:
        return CalorieClass.low
    if calories <= 600:
        return CalorieClass.medium
    return CalorieClass.high
