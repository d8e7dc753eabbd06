from functools import lru_cache

from sqlalchemy import create_engine

from activity_discovery.core.config import get_settings


@lru_cache(maxsize=1)
def get_engine():
    database_url = get_settings().database_url
    if not database_url:
        raise RuntimeError("DATABASE_URL environment variable is not set")
    return create_engine(database_url, future=True)
