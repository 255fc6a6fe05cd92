from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class StorageConfig:
    """
    Which data store backs the API.

    ``backend`` is ``"memory"`` (process-local, lost on restart) or ``"sql"``
    (SQLAlchemy against ``database_url``).
    """

    backend: str = os.getenv("EATINERY_STORAGE", "memory")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///eatinery.db")
    seed: bool = _env_flag("EATINERY_SEED", "true")
    echo_sql: bool = _env_flag("SQL_ECHO", "false")
    seed_dir: Path = Path(__file__).resolve().parent.parent / "data" / "seed"


DEFAULT_STORAGE_CONFIG = StorageConfig()
