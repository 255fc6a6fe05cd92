from .distance import (
    CALORIES_PER_KM,
    WALKING_SPEED_M_PER_MIN,
    CalorieClass,
    calorie_class,
    calories_burned,
    distance,
    walking_time,
)

__all__ = [
    "CALORIES_PER_KM",
    "WALKING_SPEED_M_PER_MIN",
    "CalorieClass",
    "calorie_class",
    "calories_burned",
    "distance",
    "walking_time",
]
