from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from activity_discovery.api.routers import activities, favorites, saved_searches
from activity_discovery.core.config import get_settings
from activity_discovery.core.logging import configure_logging
from activity_discovery.infra.database import get_engine
from activity_discovery.providers.activities.base import ActivitiesProvider
from activity_discovery.providers.activities.http import HttpActivitiesProvider
from activity_discovery.providers.activities.snapshot import SnapshotActivitiesProvider
from activity_discovery.providers.favorites.client import FavoritesClient
from activity_discovery.services.favorites import FavoritesService
from activity_discovery.services.saved_searches import SavedSearchesService


def create_app(
    engine=None,
    provider: Optional[ActivitiesProvider] = None,
    favorites_service: Optional[FavoritesService] = None,
    saved_searches_service: Optional[SavedSearchesService] = None,
) -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title="Activity Discovery API", version="0.1.0")

    if provider is None:
        if engine is not None:
            provider = SnapshotActivitiesProvider(engine)
        elif settings.activities_api_url:
            provider = HttpActivitiesProvider(settings.activities_api_url, timeout=settings.http_timeout)
        elif settings.database_url:
            provider = SnapshotActivitiesProvider(get_engine())
    if settings.activities_api_url:
        users_client = FavoritesClient(settings.activities_api_url, timeout=settings.http_timeout)
        if favorites_service is None:
            favorites_service = FavoritesService(users_client)
        if saved_searches_service is None:
            saved_searches_service = SavedSearchesService(users_client)
    app.state.activities_provider = provider
    app.state.favorites_service = favorites_service
    app.state.saved_searches_service = saved_searches_service
    app.state.baseline = None
    app.state.baseline_generation = 0

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(activities.router, prefix="/api")
    app.include_router(favorites.router, prefix="/api")
    app.include_router(saved_searches.router, prefix="/api")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
