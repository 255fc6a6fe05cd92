from __future__ import annotations

import logging
import time

from ..geo import calories_burned, distance, walking_time
from ..storage import Storage
from .models import NearbyRestaurant, RestaurantWithMenu

logger = logging.getLogger(__name__)


def filter_restaurants(
    store: Storage,
    calorie_limit: float,
    cuisine_type: str | None = None,
    is_hpb_healthy: bool | None = None,
) -> list[RestaurantWithMenu]:
    """
    Restaurants matching the filters with their menu items under ``calorie_limit``.

    ``None`` filters match everything. Order follows the store. A restaurant
    whose cheapest item is over the limit is left out entirely. Range checks on
    the limit belong to ``CalorieFilter``, not here.
    """
    start_time = time.time()

    restaurants = store.list_restaurants(cuisine_type=cuisine_type, is_hpb_healthy=is_hpb_healthy)

    results: list[RestaurantWithMenu] = []
    for restaurant in restaurants:
        items = store.list_menu_items(restaurant.id, calorie_limit=calorie_limit)
        if not items:
            continue
        results.append(RestaurantWithMenu(
            **restaurant.model_dump(),
            recommended_menu_items=items,
        ))

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        "Filter limit=%s cuisine=%s hpb=%s matched %d/%d restaurants in %sms",
        calorie_limit, cuisine_type, is_hpb_healthy,
        len(results), len(restaurants), elapsed_ms,
    )
    return results


def rank_by_distance(store: Storage, lat: float, lon: float) -> list[NearbyRestaurant]:
    """Every restaurant annotated with walking estimates from ``(lat, lon)``, nearest first."""
    ranked: list[NearbyRestaurant] = []
    for restaurant in store.list_restaurants():
        meters = distance(lat, lon, restaurant.latitude, restaurant.longitude)
        ranked.append(NearbyRestaurant(
            **restaurant.model_dump(),
            distance_meters=meters,
            walking_minutes=walking_time(meters),
            calories_burned=calories_burned(meters),
        ))
    ranked.sort(key=lambda r: r.distance_meters)
    return ranked
