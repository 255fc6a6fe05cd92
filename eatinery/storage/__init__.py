from __future__ import annotations

import logging

from .base import DuplicateEntryError, Storage, StorageError, UnknownRestaurantError
from .config import DEFAULT_STORAGE_CONFIG, StorageConfig
from .memory import MemStorage
from .seed import seed_storage
from .sql import SqlStorage

logger = logging.getLogger(__name__)

_storage: Storage | None = None


def build_storage(config: StorageConfig = DEFAULT_STORAGE_CONFIG) -> Storage:
    if config.backend == "memory":
        store: Storage = MemStorage()
    elif config.backend == "sql":
        store = SqlStorage.from_url(config.database_url, echo=config.echo_sql)
    else:
        raise ValueError(f"Unknown storage backend: {config.backend!r}")

    logger.info("Using %s storage", config.backend)
    if config.seed:
        seed_storage(store, config.seed_dir)
    return store


def get_storage() -> Storage:
    """Return the process-wide store, building it on first call."""
    global _storage
    if _storage is None:
        _storage = build_storage()
    return _storage


def set_storage(store: Storage | None) -> None:
    """Swap the process-wide store; ``None`` rebuilds it lazily from config."""
    global _storage
    _storage = store


__all__ = [
    "DuplicateEntryError",
    "MemStorage",
    "SqlStorage",
    "Storage",
    "StorageConfig",
    "StorageError",
    "UnknownRestaurantError",
    "build_storage",
    "get_storage",
    "seed_storage",
    "set_storage",
]
