"""
Sample data for a fresh store: Korean restaurants around Jurong East MRT.

Rows reference their restaurant by name; ids are whatever the target store
assigns, so the same files seed either backend.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from .base import Storage
from .config import DEFAULT_STORAGE_CONFIG
from .models import (
    DirectionStep,
    MenuItemCreate,
    RestaurantCreate,
    WalkingDirectionCreate,
)

logger = logging.getLogger(__name__)

_DEFAULT_SEED_DIR = DEFAULT_STORAGE_CONFIG.seed_dir


def _optional(value: Any) -> Any:
    return value if pd.notna(value) else None


def _split_tags(raw: Any) -> list[str]:
    if not pd.notna(raw):
        return []
    return [t.strip() for t in str(raw).split(",") if t.strip()]


def load_restaurants(seed_dir: Path = _DEFAULT_SEED_DIR) -> list[RestaurantCreate]:
    df = pd.read_csv(seed_dir / "restaurants.csv", float_precision="round_trip")
    restaurants = []
    for _, row in df.iterrows():
        restaurants.append(RestaurantCreate(
            name=row["name"],
            cuisine_type=row["cuisine_type"],
            location=row["location"],
            latitude=float(row["latitude"]),
            longitude=float(row["longitude"]),
            rating=float(row["rating"]) if pd.notna(row["rating"]) else None,
            is_hpb_healthy=bool(row["is_hpb_healthy"]),
            image_url=_optional(row["image_url"]),
            opening_hours=_optional(row["opening_hours"]),
            address=_optional(row["address"]),
            distance_in_meters=int(row["distance_in_meters"]) if pd.notna(row["distance_in_meters"]) else None,
            walk_time_minutes=int(row["walk_time_minutes"]) if pd.notna(row["walk_time_minutes"]) else None,
        ))
    return restaurants


def _load_menu_items(seed_dir: Path) -> pd.DataFrame:
    df = pd.read_csv(seed_dir / "menu_items.csv", float_precision="round_trip")
    df["tags_list"] = df["tags"].apply(_split_tags)
    return df


def _load_steps(seed_dir: Path) -> dict[str, list[DirectionStep]]:
    df = pd.read_csv(seed_dir / "direction_steps.csv").sort_values(["restaurant", "step_number"])
    steps: dict[str, list[DirectionStep]] = {}
    for name, group in df.groupby("restaurant", sort=False):
        steps[name] = [
            DirectionStep(
                step_number=int(r["step_number"]),
                instruction=r["instruction"],
                distance_meters=int(r["distance_meters"]),
                time_minutes=int(r["time_minutes"]),
            )
            for _, r in group.iterrows()
        ]
    return steps


def seed_storage(store: Storage, seed_dir: Path = _DEFAULT_SEED_DIR) -> dict[str, int]:
    """
    Load the sample dataset into ``store``.

    Skipped when the store already holds restaurants, so a persistent
    database is only seeded once. Returns the number of rows created per
    entity type.
    """
    counts = {"restaurants": 0, "menu_items": 0, "walking_directions": 0}
    if store.list_restaurants():
        logger.info("Store already holds restaurants, skipping seed data")
        return counts

    ids_by_name: dict[str, int] = {}
    for data in load_restaurants(seed_dir):
        restaurant = store.create_restaurant(data)
        ids_by_name[restaurant.name] = restaurant.id
        counts["restaurants"] += 1

    menu_df = _load_menu_items(seed_dir)
    for _, row in menu_df.iterrows():
        store.create_menu_item(MenuItemCreate(
            restaurant_id=ids_by_name[row["restaurant"]],
            name=row["name"],
            description=_optional(row["description"]),
            calories=int(row["calories"]),
            price=float(row["price"]) if pd.notna(row["price"]) else None,
            protein=int(row["protein"]) if pd.notna(row["protein"]) else None,
            carbs=int(row["carbs"]) if pd.notna(row["carbs"]) else None,
            fat=int(row["fat"]) if pd.notna(row["fat"]) else None,
            image_url=_optional(row["image_url"]),
            is_healthy=bool(row["is_healthy"]),
            tags=row["tags_list"],
        ))
        counts["menu_items"] += 1

    steps_by_name = _load_steps(seed_dir)
    summary_df = pd.read_csv(seed_dir / "walking_directions.csv")
    for _, row in summary_df.iterrows():
        steps = steps_by_name.get(row["restaurant"], [])
        store.create_walking_directions(WalkingDirectionCreate(
            restaurant_id=ids_by_name[row["restaurant"]],
            steps=steps,
            total_distance_meters=sum(s.distance_meters for s in steps),
            total_time_minutes=sum(s.time_minutes for s in steps),
            calories_burned=int(row["calories_burned"]),
        ))
        counts["walking_directions"] += 1

    logger.info(
        "Seeded %d restaurants, %d menu items, %d walking directions",
        counts["restaurants"], counts["menu_items"], counts["walking_directions"],
    )
    return counts
