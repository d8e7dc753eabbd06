import httpx
import pytest

from activity_discovery.errors import ActivitiesFetchError, FavoritesError
from activity_discovery.domain.filtering import recompute
from activity_discovery.domain.models import WhatFilter, WhereFilter
from activity_discovery.providers.activities.http import (
    HttpActivitiesProvider,
    activity_from_payload,
    process_activities,
)
from activity_discovery.providers.favorites.client import FavoritesClient


def _provider(handler):
    return HttpActivitiesProvider("https://api.example.fr/api/", transport=httpx.MockTransport(handler))


def test_fetch_unwraps_activities_and_maps_mongo_ids():
    def handler(request):
        assert request.url.path == "/api/activities"
        return httpx.Response(
            200,
            json={
                "activities": [
                    {"_id": "65f0", "title": "Concert", "when": "10/06/2025", "lat": 43.6, "lon": "1.44"},
                    {"title": "Sans identifiant"},
                    "not-a-dict",
                ]
            },
        )

    provider = _provider(handler)
    activities = provider.fetch_activities()
    assert [a.id for a in activities] == ["65f0"]
    assert activities[0].lon == 1.44
    assert provider.last_stats == {"fetched": 3, "mapped": 1, "skipped": 2, "unpublished": 0}


def test_fetch_accepts_bare_list():
    provider = _provider(lambda request: httpx.Response(200, json=[{"id": 7, "title": "Atelier"}]))
    activities = provider.fetch_activities()
    assert activities[0].id == "7"
    assert activities[0].when == ""


def test_http_error_is_wrapped():
    provider = _provider(lambda request: httpx.Response(500, json={"error": "boom"}))
    with pytest.raises(ActivitiesFetchError):
        provider.fetch_activities()


def test_missing_base_url_rejected():
    with pytest.raises(RuntimeError):
        HttpActivitiesProvider("")


def test_zero_or_bad_coordinates_are_unset():
    activity = activity_from_payload({"_id": "x", "title": "T", "lat": 0, "lon": "abc"})
    assert activity.lat is None
    assert activity.lon is None


def test_favorites_client_sends_bearer_token():
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path, request.headers["Authorization"]))
        if request.method == "GET":
            return httpx.Response(200, json={"favorites": ["a", "b"]})
        return httpx.Response(204)

    client = FavoritesClient("https://api.example.fr/api", transport=httpx.MockTransport(handler))
    client.add_favorite("a", "tok")
    assert client.list_favorites("tok") == ["a", "b"]
    assert seen[0] == ("POST", "/api/users/favorites/a", "Bearer tok")


def test_favorites_client_wraps_errors():
    client = FavoritesClient(
        "https://api.example.fr/api",
        transport=httpx.MockTransport(lambda request: httpx.Response(401)),
    )
    with pytest.raises(FavoritesError):
        client.remove_favorite("a", "expired")


@pytest.mark.parametrize(
    "payload",
    [
        {"_id": "a", "title": 42},
        {"_id": "a", "title": ["Concert"]},
        {"_id": "a", "title": "   "},
        {"_id": {"$oid": "65f0"}, "title": "Concert"},
        {"_id": True, "title": "Concert"},
    ],
)
def test_malformed_identity_or_title_is_skipped(payload):
    activities, stats = process_activities([payload])
    assert activities == []
    assert stats["skipped"] == 1


@pytest.mark.parametrize(
    "field, value",
    [
        ("when", 20250610),
        ("description", {"fr": "Rencontre"}),
        ("category", 3),
        ("subcategory", ["Sports collectifs"]),
        ("location", 31000),
    ],
)
def test_non_string_fields_are_dropped_and_filtering_still_runs(field, value):
    activities, stats = process_activities([{"_id": "a", "title": "Tournoi", field: value}])
    assert stats["mapped"] == 1
    assert getattr(activities[0], field) in ("", None)

    assert recompute(activities, WhereFilter(), "10/06/2025", WhatFilter()) == []
    assert recompute(activities, WhereFilter(), "", WhatFilter(keyword="x")) == []
    assert recompute(activities, WhereFilter(), "", WhatFilter(category="Sports")) == []
    excluded = WhatFilter(excluded_subcategories=("Sports collectifs",))
    assert recompute(activities, WhereFilter(), "", excluded) == activities


def test_unpublished_items_are_left_out_by_default():
    items = [
        {"_id": "p", "title": "Publiée"},
        {"_id": "d", "title": "Brouillon", "status": "draft"},
        {"_id": "x", "title": "Archivée", "status": "archived"},
    ]
    activities, stats = process_activities(items)
    assert [a.id for a in activities] == ["p"]
    assert stats == {"fetched": 3, "mapped": 1, "skipped": 0, "unpublished": 2}

    everything, _ = process_activities(items, published_only=False)
    assert [a.id for a in everything] == ["p", "d", "x"]
