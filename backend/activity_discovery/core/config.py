from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str]
    activities_api_url: Optional[str]
    frontend_origin: str
    log_level: str
    http_timeout: float


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL"),
        activities_api_url=os.getenv("ACTIVITIES_API_URL"),
        frontend_origin=os.getenv("FRONTEND_ORIGIN", "http://localhost:5173"),
        log_level=os.getenv("DISCOVERY_LOG_LEVEL", "INFO"),
        http_timeout=float(os.getenv("HTTP_TIMEOUT", "10")),
    )
