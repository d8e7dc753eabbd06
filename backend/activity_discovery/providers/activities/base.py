from __future__ import annotations

from typing import List, Protocol

from activity_discovery.domain.models import Activity


class ActivitiesProvider(Protocol):
    """Contract for the activity collaborator: one bulk fetch, no paging."""

    name: str

    def fetch_activities(self) -> List[Activity]:
        raise NotImplementedError
