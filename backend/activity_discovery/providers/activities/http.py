from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from activity_discovery.domain.models import Activity
from activity_discovery.errors import ActivitiesFetchError

from .base import ActivitiesProvider

logger = logging.getLogger(__name__)


class HttpActivitiesProvider(ActivitiesProvider):
    name = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not base_url:
            raise RuntimeError("ACTIVITIES_API_URL is required for HttpActivitiesProvider")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.last_stats: dict = {}

    def fetch_activities(self) -> List[Activity]:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.get(f"{self.base_url}/activities")
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ActivitiesFetchError(f"could not fetch activities: {exc}") from exc
        items = data.get("activities", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise ActivitiesFetchError("activities payload is not a list")
        activities, stats = process_activities(items)
        self.last_stats = stats
        logger.info(
            "fetched activities fetched=%s mapped=%s skipped=%s unpublished=%s",
            stats["fetched"],
            stats["mapped"],
            stats["skipped"],
            stats["unpublished"],
        )
        return activities


def process_activities(items: list[Any], published_only: bool = True) -> tuple[list[Activity], dict]:
    """Map raw items, skipping malformed ones and, by default, unpublished ones."""
    mapped: List[Activity] = []
    stats = {"fetched": len(items), "mapped": 0, "skipped": 0, "unpublished": 0}
    for item in items:
        activity = activity_from_payload(item) if isinstance(item, dict) else None
        if activity is None:
            stats["skipped"] += 1
            continue
        if published_only and activity.status != "published":
            stats["unpublished"] += 1
            continue
        mapped.append(activity)
    stats["mapped"] = len(mapped)
    return mapped, stats


def activity_from_payload(payload: dict) -> Optional[Activity]:
    activity_id = payload.get("_id") or payload.get("id")
    title = payload.get("title")
    if isinstance(activity_id, bool) or not isinstance(activity_id, (str, int)) or activity_id == "":
        return None
    if not isinstance(title, str) or not title.strip():
        return None
    return Activity(
        id=str(activity_id),
        title=title,
        description=_text(payload.get("description")) or "",
        category=_text(payload.get("category")),
        subcategory=_text(payload.get("subcategory")),
        when=_text(payload.get("when")) or "",
        lat=_coord(payload.get("lat")),
        lon=_coord(payload.get("lon")),
        location=_text(payload.get("location")),
        status=_text(payload.get("status")) or "published",
        website=_text(payload.get("website")),
        image=_text(payload.get("image")),
    )


def _text(value: Any) -> Optional[str]:
    # non-string values are dropped rather than coerced
    if isinstance(value, str) and value:
        return value
    return None


def _coord(value: Any) -> Optional[float]:
    # a zero coordinate means unset upstream
    if value in (None, "", 0):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
