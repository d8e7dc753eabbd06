from __future__ import annotations

from dataclasses import asdict
from datetime import date as date_type
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from activity_discovery.api.deps import get_baseline, get_saved_searches_service, get_session
from activity_discovery.api.routers.activities import serialize_activity
from activity_discovery.domain.models import Activity, SavedSearch, Session, WhatFilter, WhereFilter
from activity_discovery.errors import (
    AuthenticationRequired,
    FavoritesError,
    SavedSearchLimitReached,
    SavedSearchNotFound,
)
from activity_discovery.services.saved_searches import SavedSearchesService
from activity_discovery.services.search_state import SearchController

router = APIRouter(tags=["saved-searches"])

_SERVICE_ERRORS = (AuthenticationRequired, SavedSearchLimitReached, SavedSearchNotFound, FavoritesError)


class WhereIn(BaseModel):
    label: str = ""
    location: str = ""
    distance: Optional[float] = Field(default=None, gt=0)
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lon: Optional[float] = Field(default=None, ge=-180, le=180)


class WhatIn(BaseModel):
    keyword: str = ""
    category: Optional[str] = None
    subcategory: Optional[str] = None
    excluded_subcategories: List[str] = []


class SavedSearchIn(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    where: WhereIn = WhereIn()
    when: str = ""
    what: WhatIn = WhatIn()


@router.get("/saved-searches")
def list_saved_searches(
    session: Optional[Session] = Depends(get_session),
    service: SavedSearchesService = Depends(get_saved_searches_service),
):
    if session is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        searches = service.list_searches(session)
    except FavoritesError as exc:
        raise _http_error(exc) from exc
    return {"saved_searches": [_serialize(s) for s in searches]}


@router.post("/saved-searches", status_code=201)
def save_search(
    body: SavedSearchIn,
    session: Optional[Session] = Depends(get_session),
    service: SavedSearchesService = Depends(get_saved_searches_service),
):
    where = WhereFilter(**body.where.model_dump())
    what = WhatFilter(
        keyword=body.what.keyword,
        category=body.what.category or None,
        subcategory=body.what.subcategory or None,
        excluded_subcategories=tuple(body.what.excluded_subcategories),
    )
    try:
        searches = service.save(session, where, body.when, what, name=body.name)
    except _SERVICE_ERRORS as exc:
        raise _http_error(exc) from exc
    return {"saved_searches": [_serialize(s) for s in searches]}


@router.delete("/saved-searches/{index}")
def delete_saved_search(
    index: int,
    session: Optional[Session] = Depends(get_session),
    service: SavedSearchesService = Depends(get_saved_searches_service),
):
    try:
        searches = service.remove(session, index)
    except _SERVICE_ERRORS as exc:
        raise _http_error(exc) from exc
    return {"saved_searches": [_serialize(s) for s in searches]}


@router.get("/saved-searches/{index}/results")
def saved_search_results(
    index: int,
    include_expired: bool = False,
    today: Optional[date_type] = None,
    session: Optional[Session] = Depends(get_session),
    service: SavedSearchesService = Depends(get_saved_searches_service),
    baseline: List[Activity] = Depends(get_baseline),
):
    try:
        search = service.get(session, index)
    except _SERVICE_ERRORS as exc:
        raise _http_error(exc) from exc
    controller = SearchController()
    controller.set_baseline(baseline)
    controller.apply_saved(search)
    results = controller.results if include_expired else controller.visible_results(today or date_type.today())
    return {
        "search": _serialize(controller.current_search(search.name)),
        "count": len(results),
        "activities": [serialize_activity(a) for a in results],
    }


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, AuthenticationRequired):
        return HTTPException(status_code=401, detail=str(exc))
    if isinstance(exc, SavedSearchLimitReached):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, SavedSearchNotFound):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))


def _serialize(search: SavedSearch) -> dict:
    payload = asdict(search)
    payload["what"]["excluded_subcategories"] = list(search.what.excluded_subcategories)
    return payload
