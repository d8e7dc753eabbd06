from __future__ import annotations

from typing import List

from sqlalchemy.engine import Engine

from activity_discovery.domain.models import Activity
from activity_discovery.infra.db.activities_repository import ActivitiesRepository

from .base import ActivitiesProvider


class SnapshotActivitiesProvider(ActivitiesProvider):
    """Serves the baseline from the local snapshot table."""

    name = "snapshot"

    def __init__(self, engine: Engine, published_only: bool = True):
        self.repo = ActivitiesRepository(engine)
        self.published_only = published_only

    def fetch_activities(self) -> List[Activity]:
        return self.repo.list_all(published_only=self.published_only)
