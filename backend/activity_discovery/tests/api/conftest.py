from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from activity_discovery.api.main import create_app
from activity_discovery.domain.models import Activity
from activity_discovery.providers.favorites.client import FavoritesClient
from activity_discovery.services.favorites import FavoritesService
from activity_discovery.services.saved_searches import SavedSearchesService

ACTIVITIES = [
    Activity(
        id="toulouse",
        title="Match de rugby",
        description="Sport collectif",
        category="Sports",
        subcategory="Sports collectifs",
        when="10/06/2025",
        lat=43.6,
        lon=1.44,
    ),
    Activity(
        id="far",
        title="Course en montagne",
        description="Trail",
        category="Sports",
        subcategory="Sports de pleine nature",
        when="10/06/2025",
        lat=44.5,
        lon=1.44,
    ),
    Activity(
        id="january",
        title="Dégustation",
        category="Gastronomie",
        subcategory="Dégustations",
        when="01/01/2025",
        lat=43.6,
        lon=1.44,
    ),
]


class CountingProvider:
    name = "counting"

    def __init__(self, items):
        self.items = items
        self.calls = 0

    def fetch_activities(self):
        self.calls += 1
        return list(self.items)


class FakeUsersApi:
    def __init__(self):
        self.favorites: list[str] = []
        self.saved_searches: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.headers.get("Authorization") != "Bearer good-token":
            return httpx.Response(401, json={"error": "invalid token"})
        path = request.url.path
        if path.endswith("/users/me"):
            return httpx.Response(
                200,
                json={"_id": "u1", "email": "jeanne@example.fr", "pseudo": "jeanne", "role": "user"},
            )
        if path.endswith("/users/favorites") and request.method == "GET":
            return httpx.Response(200, json={"favorites": self.favorites})
        if "/users/saved-searches" in path:
            return self._saved_searches(request, path)
        activity_id = path.rsplit("/", 1)[-1]
        if request.method == "POST":
            self.favorites.append(activity_id)
        elif request.method == "DELETE":
            self.favorites.remove(activity_id)
        return httpx.Response(204)

    def _saved_searches(self, request: httpx.Request, path: str) -> httpx.Response:
        if request.method == "POST":
            entry = json.loads(request.content)
            entry["createdAt"] = "2025-06-01T10:00:00.000Z"
            self.saved_searches.append(entry)
        elif request.method == "DELETE":
            del self.saved_searches[int(path.rsplit("/", 1)[-1])]
        return httpx.Response(200, json={"savedSearches": self.saved_searches})


@pytest.fixture()
def provider():
    return CountingProvider(ACTIVITIES)


@pytest.fixture()
def users_api():
    return FakeUsersApi()


@pytest.fixture()
def api_client(provider, users_api):
    users_client = FavoritesClient("https://users.example.fr/api", transport=httpx.MockTransport(users_api))
    app = create_app(
        provider=provider,
        favorites_service=FavoritesService(users_client),
        saved_searches_service=SavedSearchesService(users_client),
    )
    with TestClient(app) as client:
        yield client
