from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from activity_discovery.api.deps import get_favorites_service, get_session
from activity_discovery.domain.models import Session
from activity_discovery.errors import AuthenticationRequired, FavoritesError
from activity_discovery.services.favorites import FavoritesService

router = APIRouter(tags=["favorites"])


@router.get("/favorites")
def list_favorites(
    session: Optional[Session] = Depends(get_session),
    service: FavoritesService = Depends(get_favorites_service),
):
    if session is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        return {"favorites": service.list_ids(session)}
    except FavoritesError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.post("/favorites/{activity_id}")
def toggle_favorite(
    activity_id: str,
    favorite: bool = True,
    session: Optional[Session] = Depends(get_session),
    service: FavoritesService = Depends(get_favorites_service),
):
    try:
        favorites = service.toggle(session, activity_id, favorite)
    except AuthenticationRequired as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except FavoritesError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return {"favorites": favorites}
