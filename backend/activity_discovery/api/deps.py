from __future__ import annotations

import logging
from threading import RLock
from typing import List, Optional

from fastapi import Header, HTTPException, Request

from activity_discovery.domain.models import Activity, Identity, Session
from activity_discovery.errors import ActivitiesFetchError, FavoritesError
from activity_discovery.providers.activities.base import ActivitiesProvider
from activity_discovery.services.favorites import FavoritesService
from activity_discovery.services.saved_searches import SavedSearchesService

logger = logging.getLogger(__name__)

_BASELINE_LOCK = RLock()


def get_provider(request: Request) -> ActivitiesProvider:
    provider = getattr(request.app.state, "activities_provider", None)
    if provider is None:
        raise HTTPException(status_code=500, detail="Activities provider not configured")
    return provider


def get_baseline(request: Request) -> List[Activity]:
    """Fetch the baseline once per application and keep it in ``app.state``."""
    state = request.app.state
    with _BASELINE_LOCK:
        baseline = getattr(state, "baseline", None)
        if baseline is None:
            baseline = refresh_baseline(request)
    return baseline


def refresh_baseline(request: Request) -> List[Activity]:
    """Fetch a new baseline; a fetch overtaken by a later one is discarded."""
    state = request.app.state
    provider = get_provider(request)
    with _BASELINE_LOCK:
        state.baseline_generation = getattr(state, "baseline_generation", 0) + 1
        generation = state.baseline_generation
    try:
        baseline = provider.fetch_activities()
    except ActivitiesFetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    with _BASELINE_LOCK:
        if generation != state.baseline_generation:
            logger.warning(
                "discarding stale activities snapshot generation=%s latest=%s",
                generation,
                state.baseline_generation,
            )
            current = getattr(state, "baseline", None)
            return current if current is not None else baseline
        state.baseline = baseline
    return baseline


def get_favorites_service(request: Request) -> FavoritesService:
    service = getattr(request.app.state, "favorites_service", None)
    if service is None:
        raise HTTPException(status_code=500, detail="Favorites service not configured")
    return service


def get_saved_searches_service(request: Request) -> SavedSearchesService:
    service = getattr(request.app.state, "saved_searches_service", None)
    if service is None:
        raise HTTPException(status_code=500, detail="Saved searches service not configured")
    return service


def get_session(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> Optional[Session]:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        return None
    state = request.app.state
    service = getattr(state, "favorites_service", None) or getattr(state, "saved_searches_service", None)
    if service is None:
        raise HTTPException(status_code=500, detail="Users API not configured")
    try:
        payload = service.client.me(token)
    except FavoritesError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    return Session(
        token=token,
        user=Identity(
            id=str(payload.get("_id") or payload.get("id") or ""),
            email=payload.get("email", ""),
            pseudo=payload.get("pseudo"),
            nom=payload.get("nom"),
            prenom=payload.get("prenom"),
            role=payload.get("role") or "user",
        ),
    )
