from activity_discovery.domain.matching import (
    category_matches,
    keyword_matches,
    resolve_selection,
    toggle_exclusion,
)
from activity_discovery.domain.models import Activity, WhatFilter

MATCHED = ["Sports collectifs", "Sports individuels"]


def make_activity(**overrides):
    payload = {
        "id": "a1",
        "title": "Tournoi de Rugby",
        "description": "Rencontre amicale",
        "category": "Sports",
        "subcategory": "Sports collectifs",
    }
    payload.update(overrides)
    return Activity(**payload)


def test_toggle_twice_returns_to_empty():
    excluded = toggle_exclusion((), MATCHED, "Sports collectifs")
    assert excluded == ("Sports collectifs",)
    assert toggle_exclusion(excluded, MATCHED, "Sports collectifs") == ()


def test_toggle_ignores_unmatched_subcategory():
    assert toggle_exclusion(("Sports individuels",), MATCHED, "Restaurants") == ("Sports individuels",)


def test_resolve_selection_last_wins():
    assert resolve_selection(MATCHED, ()) == ("Sports", "Sports individuels")


def test_resolve_selection_across_categories_follows_taxonomy_order():
    matched = ["Restaurants", "Sports adaptés", "Arts vivants"]
    assert resolve_selection(matched, ()) == ("Gastronomie", "Restaurants")


def test_resolve_selection_skips_excluded():
    excluded = toggle_exclusion((), MATCHED, "Sports individuels")
    assert resolve_selection(MATCHED, excluded) == ("Sports", "Sports collectifs")


def test_resolve_selection_none_when_all_excluded():
    assert resolve_selection(MATCHED, MATCHED) is None
    assert resolve_selection([], ()) is None


def test_keyword_matches_title_or_description():
    activity = make_activity()
    assert keyword_matches(activity, "rugby")
    assert keyword_matches(activity, "AMICALE")
    assert keyword_matches(activity, "")
    assert not keyword_matches(activity, "tennis")


def test_category_predicate():
    activity = make_activity()
    assert category_matches(activity, WhatFilter())
    assert category_matches(activity, WhatFilter(category="Sports"))
    assert category_matches(activity, WhatFilter(category="Sports", subcategory="Sports collectifs"))
    assert not category_matches(activity, WhatFilter(category="Sports", subcategory="Sports individuels"))
    assert not category_matches(activity, WhatFilter(category="Nature"))
    assert not category_matches(
        activity,
        WhatFilter(category="Sports", excluded_subcategories=("Sports collectifs",)),
    )
