from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .models import Activity, WhatFilter
from .taxonomy import TAXONOMY, Taxonomy, iter_pairs


def toggle_exclusion(current: Iterable[str], matched_subs: Iterable[str], sub: str) -> Tuple[str, ...]:
    """Flip ``sub`` in or out of the exclusion set.

    Subcategories that the current keyword did not match are ignored, so a
    stale exclusion can never be introduced through this path.
    """
    excluded = tuple(current)
    if sub not in set(matched_subs):
        return excluded
    if sub in excluded:
        return tuple(s for s in excluded if s != sub)
    return excluded + (sub,)


def resolve_selection(
    matched_subs: Iterable[str],
    excluded: Iterable[str],
    taxonomy: Taxonomy = TAXONOMY,
) -> Optional[Tuple[str, str]]:
    """Return the last eligible ``(category, subcategory)`` in taxonomy order."""
    matched = set(matched_subs)
    skipped = set(excluded)
    selected = None
    for category, subcategory in iter_pairs(taxonomy):
        if subcategory in matched and subcategory not in skipped:
            selected = (category, subcategory)
    return selected


def keyword_matches(activity: Activity, keyword: Optional[str]) -> bool:
    kw = (keyword or "").strip().lower()
    if not kw:
        return True
    return kw in (activity.title or "").lower() or kw in (activity.description or "").lower()


def is_excluded(activity: Activity, excluded: Iterable[str]) -> bool:
    if not isinstance(activity.subcategory, str):
        return False
    return activity.subcategory in set(excluded)


def category_matches(activity: Activity, what: WhatFilter) -> bool:
    if not what.category:
        return True
    if activity.category != what.category:
        return False
    if what.subcategory and activity.subcategory != what.subcategory:
        return False
    return not is_excluded(activity, what.excluded_subcategories)
