from datetime import date

import pytest

from activity_discovery.domain import filtering
from activity_discovery.domain.models import Activity, WhatFilter, WhereFilter

TOULOUSE = WhereFilter(label="Toulouse", location="31000 Toulouse", distance=20, lat=43.6, lon=1.44)


def make_activity(id, **overrides):
    payload = {
        "id": id,
        "title": f"Activité {id}",
        "description": "",
        "when": "10/06/2025",
        "lat": 43.6,
        "lon": 1.44,
    }
    payload.update(overrides)
    return Activity(**payload)


@pytest.fixture()
def baseline():
    return [
        make_activity("a", title="Match de rugby", category="Sports", subcategory="Sports collectifs"),
        make_activity("b", title="Course à pied", lat=44.5, category="Sports", subcategory="Sports individuels"),
        make_activity("c", title="Dégustation", when="01/01/2025", category="Gastronomie", subcategory="Dégustations"),
        make_activity("d", title="Balade", when="01/06/2025 - 30/06/2025", category="Nature", subcategory="Écotourisme"),
        make_activity("e", title="Atelier sans date", when="bientôt", lat=None, lon=None),
    ]


def ids(activities):
    return [a.id for a in activities]


def test_end_to_end_where_and_when(baseline):
    result = filtering.recompute(baseline[:3], TOULOUSE, "10/06/2025", WhatFilter())
    assert ids(result) == ["a"]


def test_no_filters_keeps_everything_in_order(baseline):
    assert filtering.recompute(baseline, WhereFilter(), "", WhatFilter()) == baseline


def test_recompute_is_idempotent(baseline):
    what = WhatFilter(keyword="a")
    first = filtering.recompute(baseline, TOULOUSE, "01/06/2025 - 15/06/2025", what)
    second = filtering.recompute(baseline, TOULOUSE, "01/06/2025 - 15/06/2025", what)
    assert first == second


@pytest.mark.parametrize(
    "when, what",
    [
        ("", WhatFilter(keyword="e")),
        ("10/06/2025", WhatFilter()),
        ("01/01/2025 - 31/12/2025", WhatFilter(category="Sports")),
    ],
)
def test_output_is_ordered_subsequence(baseline, when, what):
    result = filtering.recompute(baseline, WhereFilter(), when, what)
    positions = [baseline.index(a) for a in result]
    assert positions == sorted(positions)


def test_radius_requires_all_three_fields(baseline):
    partial = WhereFilter(label="Toulouse", lat=43.6, lon=1.44)
    assert filtering.recompute(baseline, partial, "", WhatFilter()) == baseline


def test_activity_without_coordinates_fails_radius(baseline):
    result = filtering.recompute(baseline, TOULOUSE, "", WhatFilter())
    assert "e" not in ids(result)


def test_range_filter_uses_overlap():
    activity = make_activity("x", when="10/01/2024 - 20/01/2024")
    assert filtering.date_ok(activity, "15/01/2024 - 25/01/2024")
    assert not filtering.date_ok(activity, "21/01/2024 - 25/01/2024")


def test_single_date_inside_activity_period(baseline):
    result = filtering.recompute(baseline, WhereFilter(), "20/06/2025", WhatFilter())
    assert ids(result) == ["d"]


def test_unparsable_filter_is_ignored(baseline):
    assert filtering.recompute(baseline, WhereFilter(), "un jour", WhatFilter()) == baseline
    assert filtering.recompute(baseline, WhereFilter(), "bogus - 12/06/2025", WhatFilter()) == baseline


def test_unparsable_activity_date_excluded_in_both_branches(baseline):
    assert "e" not in ids(filtering.recompute(baseline, WhereFilter(), "10/06/2025", WhatFilter()))
    assert "e" not in ids(filtering.recompute(baseline, WhereFilter(), "01/01/2025 - 31/12/2025", WhatFilter()))


def test_excluded_subcategory_dropped_even_if_keyword_matches(baseline):
    what = WhatFilter(keyword="rugby", excluded_subcategories=("Sports collectifs",))
    assert filtering.recompute(baseline, WhereFilter(), "", what) == []


def test_category_and_keyword_are_anded(baseline):
    what = WhatFilter(keyword="course", category="Sports")
    assert ids(filtering.recompute(baseline, WhereFilter(), "", what)) == ["b"]
    what = WhatFilter(keyword="rugby", category="Sports", subcategory="Sports individuels")
    assert filtering.recompute(baseline, WhereFilter(), "", what) == []


def test_nearby_and_expiry(baseline):
    today = date(2025, 6, 20)
    near = filtering.nearby(baseline, 43.6, 1.44, today)
    assert ids(near) == ["d"]
    assert filtering.nearby(baseline, None, 1.44, today) == []


def test_active_results_hide_expired(baseline):
    visible = filtering.active_results(baseline, date(2025, 6, 11))
    assert ids(visible) == ["d", "e"]


def test_favorites_view_keeps_baseline_order(baseline):
    view = filtering.favorites_view(baseline, ["d", "a"], date(2025, 6, 1))
    assert ids(view) == ["a", "d"]


def test_has_active_search():
    assert not filtering.has_active_search(WhereFilter(), "", WhatFilter())
    assert filtering.has_active_search(WhereFilter(), "10/06/2025", WhatFilter())
    assert filtering.has_active_search(WhereFilter(), "", WhatFilter(keyword=" rugby "))
    assert not filtering.has_active_search(WhereFilter(), "", WhatFilter(keyword="   "))
