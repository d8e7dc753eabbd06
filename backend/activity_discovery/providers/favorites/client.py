from __future__ import annotations

from typing import List, Optional

import httpx

from activity_discovery.errors import FavoritesError


class FavoritesClient:
    """Thin client for the identity, favorites and saved-search endpoints of the users API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not base_url:
            raise RuntimeError("ACTIVITIES_API_URL is required for FavoritesClient")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def me(self, token: str) -> dict:
        data = self._request("GET", "/users/me", token)
        if isinstance(data, dict) and isinstance(data.get("user"), dict):
            return data["user"]
        return data or {}

    def list_favorites(self, token: str) -> List[str]:
        data = self._request("GET", "/users/favorites", token)
        if isinstance(data, dict):
            data = data.get("favorites", [])
        if not isinstance(data, list):
            return []
        return [str(item) for item in data]

    def add_favorite(self, activity_id: str, token: str) -> None:
        self._request("POST", f"/users/favorites/{activity_id}", token)

    def remove_favorite(self, activity_id: str, token: str) -> None:
        self._request("DELETE", f"/users/favorites/{activity_id}", token)

    def list_saved_searches(self, token: str) -> List[dict]:
        return _saved_searches(self._request("GET", "/users/saved-searches", token))

    def add_saved_search(self, payload: dict, token: str) -> List[dict]:
        return _saved_searches(self._request("POST", "/users/saved-searches", token, json=payload))

    def remove_saved_search(self, index: int, token: str) -> List[dict]:
        return _saved_searches(self._request("DELETE", f"/users/saved-searches/{index}", token))

    def _request(self, method: str, path: str, token: str, json: Optional[dict] = None):
        headers = {"Authorization": f"Bearer {token}"}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.request(method, f"{self.base_url}{path}", headers=headers, json=json)
                resp.raise_for_status()
                if not resp.content:
                    return None
                return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise FavoritesError(f"{method} {path} failed: {exc}") from exc


def _saved_searches(data) -> List[dict]:
    if isinstance(data, dict):
        data = data.get("savedSearches", [])
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]
