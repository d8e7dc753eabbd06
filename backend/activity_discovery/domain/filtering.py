from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence

from .dates import is_expired, normalize_dashes, parse_instant, parse_period, periods_overlap
from .geo import within_radius
from .matching import category_matches, is_excluded, keyword_matches
from .models import Activity, WhatFilter, WhereFilter

NEARBY_RADIUS_KM = 50.0


def geo_ok(activity: Activity, where: WhereFilter) -> bool:
    if not where.has_radius:
        return True
    return within_radius((activity.lat, activity.lon), (where.lat, where.lon), where.distance)


def date_ok(activity: Activity, when: Optional[str]) -> bool:
    """Temporal predicate.

    An empty or unparsable filter imposes nothing. Under an active filter an
    activity whose own ``when`` cannot be parsed is rejected in both the range
    and the single-date branch.
    """
    if not when or not when.strip():
        return True
    if "-" in normalize_dashes(when):
        wanted = parse_period(when)
        if wanted is None:
            return True
        own = parse_period(activity.when)
        if own is None:
            return False
        return periods_overlap(own.start, own.end, wanted.start, wanted.end)

    instant = parse_instant(when)
    if instant is None:
        return True
    own = parse_period(activity.when)
    if own is None:
        return False
    return own.start <= instant <= own.end


def what_ok(activity: Activity, what: WhatFilter) -> bool:
    if is_excluded(activity, what.excluded_subcategories):
        return False
    if what.category and not category_matches(activity, what):
        return False
    return keyword_matches(activity, what.keyword)


def recompute(
    baseline: Sequence[Activity],
    where: WhereFilter,
    when: Optional[str],
    what: WhatFilter,
) -> List[Activity]:
    return [
        activity
        for activity in baseline
        if geo_ok(activity, where) and date_ok(activity, when) and what_ok(activity, what)
    ]


def has_active_search(where: WhereFilter, when: Optional[str], what: WhatFilter) -> bool:
    has_where = bool(where.location or where.label or where.lat or where.lon or where.distance)
    has_when = bool(when)
    has_what = bool((what.keyword or "").strip() or what.category or what.subcategory)
    return has_where or has_when or has_what


def active_results(activities: Iterable[Activity], today: date) -> List[Activity]:
    return [a for a in activities if not is_expired(a.when, today)]


def nearby(
    baseline: Iterable[Activity],
    lat: Optional[float],
    lon: Optional[float],
    today: date,
    radius_km: float = NEARBY_RADIUS_KM,
) -> List[Activity]:
    if lat is None or lon is None:
        return []
    return [
        a
        for a in baseline
        if not is_expired(a.when, today) and within_radius((a.lat, a.lon), (lat, lon), radius_km)
    ]


def favorites_view(baseline: Iterable[Activity], favorite_ids: Iterable[str], today: date) -> List[Activity]:
    wanted = set(favorite_ids)
    return [a for a in baseline if a.id in wanted and not is_expired(a.when, today)]
