from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


@dataclass(frozen=True)
class AppConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "eatinery-secret-change-in-production")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Jurong East MRT; seed distances are measured from here.
    reference_lat: float = float(os.getenv("REFERENCE_LAT", "1.3331"))
    reference_lon: float = float(os.getenv("REFERENCE_LON", "103.7422"))


DEFAULT_APP_CONFIG = AppConfig()
