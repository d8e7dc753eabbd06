from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Iterable, List

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Engine

from activity_discovery.domain.models import Activity

from .tables import activities_table

ACTIVITY_COLUMNS = [
    "title",
    "description",
    "category",
    "subcategory",
    "when",
    "lat",
    "lon",
    "location",
    "status",
    "website",
    "image",
]


class ActivitiesRepository:
    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine

    def upsert_activities(self, activities: Iterable[Activity]) -> dict:
        stats = {"inserted": 0, "updated": 0}
        now = datetime.now(timezone.utc)
        with self.engine.begin() as conn:
            position = conn.execute(
                select(func.coalesce(func.max(activities_table.c.position), 0))
            ).scalar_one()
            for activity in activities:
                data = asdict(activity)
                values = {col: data[col] for col in ACTIVITY_COLUMNS}
                existing = conn.execute(
                    select(activities_table.c.id).where(activities_table.c.id == activity.id)
                ).scalar_one_or_none()
                if existing is not None:
                    conn.execute(
                        update(activities_table)
                        .where(activities_table.c.id == activity.id)
                        .values(**values, updated_at=now)
                    )
                    stats["updated"] += 1
                else:
                    position += 1
                    conn.execute(
                        insert(activities_table).values(
                            id=activity.id, **values, position=position, created_at=now, updated_at=now
                        )
                    )
                    stats["inserted"] += 1
        return stats

    def list_all(self, published_only: bool = True) -> List[Activity]:
        stmt = select(activities_table).order_by(activities_table.c.position)
        if published_only:
            stmt = stmt.where(activities_table.c.status == "published")
        with self.engine.begin() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [self._to_activity(row) for row in rows]

    @staticmethod
    def _to_activity(row) -> Activity:
        return Activity(
            id=row["id"],
            title=row["title"],
            description=row["description"] or "",
            category=row["category"],
            subcategory=row["subcategory"],
            when=row["when"] or "",
            lat=row["lat"],
            lon=row["lon"],
            location=row["location"],
            status=row["status"],
            website=row["website"],
            image=row["image"],
        )
