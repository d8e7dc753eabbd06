from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine

from activity_discovery.infra.database import get_engine
from activity_discovery.infra.db.activities_repository import ActivitiesRepository
from activity_discovery.infra.db.tables import metadata
from activity_discovery.providers.activities.http import process_activities

logger = logging.getLogger(__name__)


def import_activities_from_json(
    path: str | Path,
    *,
    engine=None,
    database_url: Optional[str] = None,
) -> dict:
    """Load an activities export (list or ``{"activities": [...]}``) into the snapshot table."""
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Activities file not found: {source}")

    if engine is None:
        engine = create_engine(database_url, future=True) if database_url else get_engine()
    metadata.create_all(engine)

    payload = json.loads(source.read_text(encoding="utf-8"))
    items = payload.get("activities", []) if isinstance(payload, dict) else payload
    activities, map_stats = process_activities(items, published_only=False)

    stats = ActivitiesRepository(engine).upsert_activities(activities)
    stats["skipped"] = map_stats["skipped"]
    logger.info(
        "import complete file=%s inserted=%s updated=%s skipped=%s",
        source,
        stats["inserted"],
        stats["updated"],
        stats["skipped"],
    )
    return stats
