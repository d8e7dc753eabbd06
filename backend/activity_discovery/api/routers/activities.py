from __future__ import annotations

from dataclasses import asdict
from datetime import date as date_type
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from activity_discovery.api.deps import get_baseline, refresh_baseline
from activity_discovery.domain import filtering
from activity_discovery.domain.matching import resolve_selection
from activity_discovery.domain.models import Activity, WhatFilter, WhereFilter
from activity_discovery.domain.taxonomy import TAXONOMY, match_subcategories

router = APIRouter(tags=["activities"])


@router.get("/activities/search")
def search_activities(
    location: str = "",
    label: str = "",
    distance: Optional[float] = Query(None, gt=0),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    when: str = "",
    keyword: str = "",
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    excluded: List[str] = Query(default=[]),
    include_expired: bool = False,
    today: Optional[date_type] = None,
    baseline: List[Activity] = Depends(get_baseline),
):
    where = WhereFilter(label=label, location=location, distance=distance, lat=lat, lon=lon)
    what = WhatFilter(
        keyword=keyword,
        category=category or None,
        subcategory=subcategory or None,
        excluded_subcategories=tuple(excluded),
    )
    results = filtering.recompute(baseline, where, when, what)
    if not include_expired:
        results = filtering.active_results(results, today or date_type.today())
    return {
        "active_search": filtering.has_active_search(where, when, what),
        "count": len(results),
        "activities": [serialize_activity(a) for a in results],
    }


@router.get("/activities/nearby")
def nearby_activities(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(filtering.NEARBY_RADIUS_KM, gt=0),
    today: Optional[date_type] = None,
    baseline: List[Activity] = Depends(get_baseline),
):
    results = filtering.nearby(baseline, lat, lon, today or date_type.today(), radius_km)
    return [serialize_activity(a) for a in results]


@router.post("/activities/refresh")
def refresh_activities(request: Request):
    baseline = refresh_baseline(request)
    return {"count": len(baseline)}


@router.get("/taxonomy")
def get_taxonomy():
    return [{"name": name, "sub": list(subs)} for name, subs in TAXONOMY]


@router.get("/subcategories/match")
def match(
    keyword: str = Query(..., min_length=1, max_length=100),
    excluded: List[str] = Query(default=[]),
):
    matched = match_subcategories(keyword.strip().lower())
    selection = resolve_selection(matched, excluded)
    return {
        "matched": matched,
        "excluded": [s for s in excluded if s in matched],
        "selection": {"category": selection[0], "subcategory": selection[1]} if selection else None,
    }


def serialize_activity(activity: Activity) -> dict:
    payload = asdict(activity)
    payload["_id"] = payload.pop("id")
    return payload
