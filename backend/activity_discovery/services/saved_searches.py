from __future__ import annotations

import logging
from typing import List, Optional

from activity_discovery.domain.models import SavedSearch, Session, WhatFilter, WhereFilter
from activity_discovery.domain.saved_searches import MAX_SAVED_SEARCHES, describe, from_payload, to_payload
from activity_discovery.errors import AuthenticationRequired, SavedSearchLimitReached, SavedSearchNotFound
from activity_discovery.providers.favorites.client import FavoritesClient

logger = logging.getLogger(__name__)


class SavedSearchesService:
    """Per-user saved filter sets, at most ``MAX_SAVED_SEARCHES`` of them."""

    def __init__(self, client: FavoritesClient):
        self.client = client

    def list_searches(self, session: Optional[Session]) -> List[SavedSearch]:
        if session is None:
            return []
        searches = []
        for item in self.client.list_saved_searches(session.token):
            search = from_payload(item)
            if search is not None:
                searches.append(search)
        return searches

    def get(self, session: Optional[Session], index: int) -> SavedSearch:
        searches = self.list_searches(_require(session))
        if not 0 <= index < len(searches):
            raise SavedSearchNotFound(f"Recherche sauvegardée introuvable: {index}")
        return searches[index]

    def save(
        self,
        session: Optional[Session],
        where: WhereFilter,
        when: str,
        what: WhatFilter,
        name: Optional[str] = None,
    ) -> List[SavedSearch]:
        session = _require(session)
        if len(self.list_searches(session)) >= MAX_SAVED_SEARCHES:
            raise SavedSearchLimitReached(
                f"Vous ne pouvez pas sauvegarder plus de {MAX_SAVED_SEARCHES} recherches."
            )
        search = SavedSearch(name=name or describe(where, when, what), where=where, when=when or "", what=what)
        self.client.add_saved_search(to_payload(search), session.token)
        logger.info("saved search added user=%s name=%s", session.user.id, search.name)
        return self.list_searches(session)

    def remove(self, session: Optional[Session], index: int) -> List[SavedSearch]:
        session = _require(session)
        self.get(session, index)
        self.client.remove_saved_search(index, session.token)
        logger.info("saved search removed user=%s index=%s", session.user.id, index)
        return self.list_searches(session)


def _require(session: Optional[Session]) -> Session:
    if session is None or not session.token:
        raise AuthenticationRequired("Merci de vous connecter pour gérer vos recherches sauvegardées.")
    return session
