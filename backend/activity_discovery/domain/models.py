from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class Activity:
    id: str
    title: str
    description: str = ""
    category: Optional[str] = None
    subcategory: Optional[str] = None
    when: str = ""
    lat: Optional[float] = None
    lon: Optional[float] = None
    location: Optional[str] = None
    status: str = "published"
    website: Optional[str] = None
    image: Optional[str] = None


@dataclass(frozen=True)
class Period:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class WhereFilter:
    label: str = ""
    location: str = ""
    distance: Optional[float] = None
    lat: Optional[float] = None
    lon: Optional[float] = None

    @property
    def has_radius(self) -> bool:
        return self.distance is not None and self.lat is not None and self.lon is not None

    def merge(self, other: "WhereFilter") -> "WhereFilter":
        """Apply ``other`` on top of this filter.

        Coordinates are sticky: a new value without ``lat``/``lon`` keeps the
        previously geocoded point.
        """
        return WhereFilter(
            label=other.label,
            location=other.location,
            distance=other.distance,
            lat=other.lat if other.lat is not None else self.lat,
            lon=other.lon if other.lon is not None else self.lon,
        )


@dataclass(frozen=True)
class WhatFilter:
    keyword: str = ""
    category: Optional[str] = None
    subcategory: Optional[str] = None
    excluded_subcategories: Tuple[str, ...] = field(default_factory=tuple)

    def with_keyword(self, keyword: str) -> "WhatFilter":
        # exclusions only make sense for the keyword that produced them
        if keyword == self.keyword:
            return self
        return replace(self, keyword=keyword, excluded_subcategories=())

    def with_exclusions(self, excluded) -> "WhatFilter":
        return replace(self, excluded_subcategories=tuple(excluded))

    def with_selection(self, category: Optional[str], subcategory: Optional[str]) -> "WhatFilter":
        return replace(self, category=category or None, subcategory=subcategory or None)


@dataclass(frozen=True)
class Identity:
    id: str
    email: str
    pseudo: Optional[str] = None
    nom: Optional[str] = None
    prenom: Optional[str] = None
    role: str = "user"


@dataclass(frozen=True)
class Session:
    token: str
    user: Identity


@dataclass(frozen=True)
class SavedSearch:
    name: str
    where: WhereFilter = field(default_factory=WhereFilter)
    when: str = ""
    what: WhatFilter = field(default_factory=WhatFilter)
    created_at: Optional[str] = None
