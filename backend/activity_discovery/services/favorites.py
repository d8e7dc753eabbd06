from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from activity_discovery.domain.filtering import favorites_view
from activity_discovery.domain.models import Activity, Session
from activity_discovery.errors import AuthenticationRequired
from activity_discovery.providers.favorites.client import FavoritesClient

logger = logging.getLogger(__name__)


class FavoritesService:
    def __init__(self, client: FavoritesClient):
        self.client = client

    def list_ids(self, session: Optional[Session]) -> List[str]:
        if session is None:
            return []
        return self.client.list_favorites(session.token)

    def toggle(self, session: Optional[Session], activity_id: str, favorite: bool) -> List[str]:
        """Add or remove one favorite, then return the refreshed id list."""
        if session is None or not session.token:
            raise AuthenticationRequired("Merci de vous connecter pour gérer vos favoris.")
        if favorite:
            self.client.add_favorite(activity_id, session.token)
        else:
            self.client.remove_favorite(activity_id, session.token)
        logger.info("favorite %s user=%s activity=%s", "added" if favorite else "removed", session.user.id, activity_id)
        return self.list_ids(session)

    def favorites(self, session: Optional[Session], baseline: Sequence[Activity], today: date) -> List[Activity]:
        return favorites_view(baseline, self.list_ids(session), today)
