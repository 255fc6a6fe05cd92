from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_user
from .auth.models import Credentials
from .auth.users import authenticate, register
from .config import DEFAULT_APP_CONFIG
from .geo import distance, walking_time
from .recommendations.models import CalorieFilter, NearbyRestaurant, RestaurantWithMenu
from .recommendations.pipeline import filter_restaurants, rank_by_distance
from .storage import (
    DuplicateEntryError,
    Storage,
    StorageError,
    UnknownRestaurantError,
    get_storage,
)
from .storage.models import (
    MenuItem,
    MenuItemBase,
    MenuItemCreate,
    Restaurant,
    RestaurantCreate,
    UserOut,
    WalkingDirection,
    WalkingDirectionBase,
    WalkingDirectionCreate,
)

logging.basicConfig(
    level=DEFAULT_APP_CONFIG.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Eatinery API", version="1.0.0")
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_APP_CONFIG.session_secret)


# ── Error handling ───────────────────────────────────────────────────────


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = (
        "Invalid filter parameters"
        if request.url.path == "/api/restaurants/filter"
        else "Invalid request parameters"
    )
    return JSONResponse(
        status_code=400,
        content={"detail": message, "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(StorageError)
async def storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal storage error"})


def _restaurant_or_404(store: Storage, restaurant_id: int) -> Restaurant:
    restaurant = store.get_restaurant(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


def _with_reference_distance(data: RestaurantCreate) -> RestaurantCreate:
    """Fill in distance / walk time from the reference point when the caller omitted them."""
    meters = data.distance_in_meters
    if meters is None:
        meters = distance(
            DEFAULT_APP_CONFIG.reference_lat,
            DEFAULT_APP_CONFIG.reference_lon,
            data.latitude,
            data.longitude,
        )
    minutes = data.walk_time_minutes
    if minutes is None:
        minutes = walking_time(meters)
    return data.model_copy(update={"distance_in_meters": meters, "walk_time_minutes": minutes})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/cuisines")
def cuisines(store: Storage = Depends(get_storage)) -> list[str]:
    return store.cuisine_types()


@app.get("/api/restaurants", response_model=list[Restaurant])
def list_restaurants(
    cuisine_type: str | None = Query(default=None, alias="cuisineType"),
    is_hpb_healthy: bool | None = Query(default=None, alias="isHpbHealthy"),
    store: Storage = Depends(get_storage),
) -> list[Restaurant]:
    return store.list_restaurants(cuisine_type=cuisine_type, is_hpb_healthy=is_hpb_healthy)


@app.get("/api/restaurants/nearby", response_model=list[NearbyRestaurant])
def nearby_restaurants(
    lat: float = Query(..., ge=-90, le=90, description="Your latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Your longitude"),
    store: Storage = Depends(get_storage),
) -> list[NearbyRestaurant]:
    return rank_by_distance(store, lat, lon)


@app.post("/api/restaurants/filter", response_model=list[RestaurantWithMenu])
def filter_by_calories(
    body: CalorieFilter,
    store: Storage = Depends(get_storage),
) -> list[RestaurantWithMenu]:
    return filter_restaurants(
        store,
        calorie_limit=body.limit,
        cuisine_type=body.cuisine_type,
        is_hpb_healthy=body.is_hpb_healthy,
    )


@app.get("/api/restaurants/{restaurant_id}", response_model=Restaurant)
def get_restaurant(restaurant_id: int, store: Storage = Depends(get_storage)) -> Restaurant:
    return _restaurant_or_404(store, restaurant_id)


@app.get("/api/restaurants/{restaurant_id}/menu", response_model=list[MenuItem])
def get_menu(
    restaurant_id: int,
    calorie_limit: int | None = Query(default=None, ge=0, alias="calorieLimit"),
    store: Storage = Depends(get_storage),
) -> list[MenuItem]:
    _restaurant_or_404(store, restaurant_id)
    return store.list_menu_items(restaurant_id, calorie_limit=calorie_limit)


@app.get("/api/restaurants/{restaurant_id}/directions", response_model=WalkingDirection)
def get_directions(restaurant_id: int, store: Storage = Depends(get_storage)) -> WalkingDirection:
    directions = store.get_walking_directions(restaurant_id)
    if directions is None:
        raise HTTPException(status_code=404, detail="Walking directions not found")
    return directions


@app.get("/api/menu-items/{item_id}", response_model=MenuItem)
def get_menu_item(item_id: int, store: Storage = Depends(get_storage)) -> MenuItem:
    item = store.get_menu_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return item


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/api/register", status_code=201, response_model=UserOut)
def register_user(
    body: Credentials,
    request: Request,
    store: Storage = Depends(get_storage),
) -> dict:
    try:
        user = register(store, body.username, body.password)
    except DuplicateEntryError:
        raise HTTPException(status_code=400, detail="Username already exists")
    request.session["user"] = user
    logger.info("Registered user %s", user["username"])
    return user


@app.post("/api/login", response_model=UserOut)
def login(body: Credentials, request: Request, store: Storage = Depends(get_storage)) -> dict:
    user = authenticate(store, body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return user


@app.post("/api/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/api/user", response_model=UserOut)
def current_user(user: dict = Depends(require_user)) -> dict:
    return user


# ── Authenticated endpoints ──────────────────────────────────────────────


@app.post("/api/restaurants", status_code=201, response_model=Restaurant)
def create_restaurant(
    body: RestaurantCreate,
    store: Storage = Depends(get_storage),
    user: dict = Depends(require_user),
) -> Restaurant:
    restaurant = store.create_restaurant(_with_reference_distance(body))
    logger.info("User %s created restaurant %d", user["username"], restaurant.id)
    return restaurant


@app.post("/api/restaurants/{restaurant_id}/menu", status_code=201, response_model=MenuItem)
def create_menu_item(
    restaurant_id: int,
    body: MenuItemBase,
    store: Storage = Depends(get_storage),
    user: dict = Depends(require_user),
) -> MenuItem:
    try:
        return store.create_menu_item(
            MenuItemCreate(**body.model_dump(), restaurant_id=restaurant_id)
        )
    except UnknownRestaurantError:
        raise HTTPException(status_code=404, detail="Restaurant not found")


@app.post(
    "/api/restaurants/{restaurant_id}/directions",
    status_code=201,
    response_model=WalkingDirection,
)
def create_directions(
    restaurant_id: int,
    body: WalkingDirectionBase,
    store: Storage = Depends(get_storage),
    user: dict = Depends(require_user),
) -> WalkingDirection:
    try:
        return store.create_walking_directions(
            WalkingDirectionCreate(**body.model_dump(), restaurant_id=restaurant_id)
        )
    except UnknownRestaurantError:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    except DuplicateEntryError:
        raise HTTPException(status_code=409, detail="Walking directions already exist")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "eatinery.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
