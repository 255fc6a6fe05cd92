"""Relational store backed by SQLAlchemy."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .base import DuplicateEntryError, Storage, StorageError, UnknownRestaurantError
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

Base = declarative_base()

# AUTOINCREMENT keeps SQLite from handing out a deleted row's id again.
_NEVER_REUSE_IDS = {"sqlite_autoincrement": True}


class UserRow(Base):
    __tablename__ = "users"
    __table_args__ = _NEVER_REUSE_IDS

    id = Column(Integer, primary_key=True)
    username = Column(String(100), unique=True, nullable=False)
    password = Column(String, nullable=False)


class RestaurantRow(Base):
    __tablename__ = "restaurants"
    __table_args__ = _NEVER_REUSE_IDS

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    cuisine_type = Column(String, nullable=False, index=True)
    location = Column(String, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    rating = Column(Float)
    is_hpb_healthy = Column(Boolean, nullable=False, default=False, index=True)
    image_url = Column(String)
    opening_hours = Column(String)
    address = Column(String)
    distance_in_meters = Column(Integer)
    walk_time_minutes = Column(Integer)

    def __repr__(self):
        return f"<Restaurant(id={self.id}, name='{self.name}', cuisine='{self.cuisine_type}')>"


class MenuItemRow(Base):
    __tablename__ = "menu_items"
    __table_args__ = _NEVER_REUSE_IDS

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    calories = Column(Integer, nullable=False)
    price = Column(Float)
    protein = Column(Integer)
    carbs = Column(Integer)
    fat = Column(Integer)
    image_url = Column(String)
    is_healthy = Column(Boolean, nullable=False, default=False)
    tags = Column(JSON, nullable=False, default=list)  # ["Low carb", ...]


class WalkingDirectionRow(Base):
    __tablename__ = "walking_directions"
    __table_args__ = _NEVER_REUSE_IDS

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, unique=True)
    steps = Column(JSON, nullable=False)  # [{"step_number": 1, ...}, ...]
    total_distance_meters = Column(Integer, nullable=False)
    total_time_minutes = Column(Integer, nullable=False)
    calories_burned = Column(Integer, nullable=False)


def create_engine_for(database_url: str, echo: bool = False) -> Engine:
    """
    Build an engine for ``database_url``.

    SQLite connections are shared with the server threadpool, and an
    in-memory SQLite database lives on a single pooled connection.
    """
    kwargs: dict = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


class SqlStorage(Storage):
    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        Base.metadata.create_all(bind=engine)
        logger.info("SQL storage ready at %s", engine.url.render_as_string(hide_password=True))

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> SqlStorage:
        return cls(create_engine_for(database_url, echo=echo))

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise DuplicateEntryError(str(e.orig)) from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("SQL storage operation failed", exc_info=True)
            raise StorageError("Storage operation failed") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self._engine.dispose()

    # ── Users ────────────────────────────────────────────────────────────

    def get_user(self, user_id: int) -> User | None:
        with self._session() as session:
            row = session.get(UserRow, user_id)
            return User.model_validate(row) if row else None

    def get_user_by_username(self, username: str) -> User | None:
        with self._session() as session:
            row = session.scalars(select(UserRow).where(UserRow.username == username)).first()
            return User.model_validate(row) if row else None

    def create_user(self, data: UserCreate) -> User:
        with self._session() as session:
            row = UserRow(**data.model_dump())
            session.add(row)
            session.flush()
            return User.model_validate(row)

    # ── Restaurants ──────────────────────────────────────────────────────

    def list_restaurants(
        self,
        cuisine_type: str | None = None,
        is_hpb_healthy: bool | None = None,
    ) -> list[Restaurant]:
        query = select(RestaurantRow)
        if cuisine_type is not None:
            query = query.where(RestaurantRow.cuisine_type == cuisine_type)
        if is_hpb_healthy is not None:
            query = query.where(RestaurantRow.is_hpb_healthy == is_hpb_healthy)
        with self._session() as session:
            rows = session.scalars(query.order_by(RestaurantRow.id)).all()
            return [Restaurant.model_validate(row) for row in rows]

    def get_restaurant(self, restaurant_id: int) -> Restaurant | None:
        with self._session() as session:
            row = session.get(RestaurantRow, restaurant_id)
            return Restaurant.model_validate(row) if row else None

    def create_restaurant(self, data: RestaurantCreate) -> Restaurant:
        with self._session() as session:
            row = RestaurantRow(**data.model_dump())
            session.add(row)
            session.flush()
            return Restaurant.model_validate(row)

    # ── Menu items ───────────────────────────────────────────────────────

    def list_menu_items(
        self,
        restaurant_id: int,
        calorie_limit: float | None = None,
    ) -> list[MenuItem]:
        query = select(MenuItemRow).where(MenuItemRow.restaurant_id == restaurant_id)
        if calorie_limit is not None:
            query = query.where(MenuItemRow.calories <= calorie_limit)
        with self._session() as session:
            rows = session.scalars(query.order_by(MenuItemRow.id)).all()
            return [MenuItem.model_validate(row) for row in rows]

    def get_menu_item(self, item_id: int) -> MenuItem | None:
        with self._session() as session:
            row = session.get(MenuItemRow, item_id)
            return MenuItem.model_validate(row) if row else None

    def create_menu_item(self, data: MenuItemCreate) -> MenuItem:
        with self._session() as session:
            # SQLite does not enforce foreign keys unless asked to.
            if session.get(RestaurantRow, data.restaurant_id) is None:
                raise UnknownRestaurantError(data.restaurant_id)
            row = MenuItemRow(**data.model_dump())
            session.add(row)
            session.flush()
            return MenuItem.model_validate(row)

    # ── Walking directions ───────────────────────────────────────────────

    def get_walking_directions(self, restaurant_id: int) -> WalkingDirection | None:
        query = select(WalkingDirectionRow).where(WalkingDirectionRow.restaurant_id == restaurant_id)
        with self._session() as session:
            row = session.scalars(query).first()
            return WalkingDirection.model_validate(row) if row else None

    def create_walking_directions(self, data: WalkingDirectionCreate) -> WalkingDirection:
        with self._session() as session:
            if session.get(RestaurantRow, data.restaurant_id) is None:
                raise UnknownRestaurantError(data.restaurant_id)
            row = WalkingDirectionRow(**data.model_dump())
            session.add(row)
            session.flush()
            return WalkingDirection.model_validate(row)
