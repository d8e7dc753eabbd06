from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional

from .models import SavedSearch, WhatFilter, WhereFilter

MAX_SAVED_SEARCHES = 3


def describe(where: WhereFilter, when: str, what: WhatFilter) -> str:
    """Readable name built from the active criteria, e.g. ``"rugby · Toulouse (20 km) · 10/06/2025"``."""
    parts = []
    if what.keyword:
        parts.append(what.keyword)
    elif what.subcategory or what.category:
        parts.append(what.subcategory or what.category)
    place = where.label or where.location
    if place:
        parts.append(f"{place} ({where.distance:g} km)" if where.distance else place)
    if when and when.strip():
        parts.append(when.strip())
    return " · ".join(parts) or "Toutes les activités"


def to_payload(search: SavedSearch) -> dict:
    where, what = search.where, search.what
    return {
        "name": search.name,
        "filters": {
            "where": {
                "label": where.label,
                "location": where.location,
                "distance": where.distance,
                "lat": where.lat,
                "lon": where.lon,
            },
            "when": search.when,
            "what": {
                "keyword": what.keyword,
                "category": what.category,
                "subcategory": what.subcategory,
                "excludedSubcategories": list(what.excluded_subcategories),
            },
        },
    }


def from_payload(payload: Any) -> Optional[SavedSearch]:
    """Rebuild a saved search from the users API; anything unreadable gives None."""
    if not isinstance(payload, dict):
        return None
    filters = payload.get("filters")
    if not isinstance(filters, dict):
        return None
    where = filters.get("where") if isinstance(filters.get("where"), dict) else {}
    what = filters.get("what") if isinstance(filters.get("what"), dict) else {}
    when = filters.get("when") if isinstance(filters.get("when"), str) else ""
    excluded = what.get("excludedSubcategories")
    if not isinstance(excluded, list):
        excluded = []
    name = payload.get("name") if isinstance(payload.get("name"), str) else ""
    search = SavedSearch(
        name=name,
        where=WhereFilter(
            label=_str(where.get("label")),
            location=_str(where.get("location")),
            distance=_number(where.get("distance")),
            lat=_number(where.get("lat")),
            lon=_number(where.get("lon")),
        ),
        when=when,
        what=WhatFilter(
            keyword=_str(what.get("keyword")),
            category=_str(what.get("category")) or None,
            subcategory=_str(what.get("subcategory")) or None,
            excluded_subcategories=tuple(s for s in excluded if isinstance(s, str)),
        ),
        created_at=_str(payload.get("createdAt")) or None,
    )
    if not search.name:
        search = replace(search, name=describe(search.where, search.when, search.what))
    return search


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)
