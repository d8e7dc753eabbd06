from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Iterable, List, Optional, Sequence

from activity_discovery.domain import filtering
from activity_discovery.domain.matching import resolve_selection, toggle_exclusion
from activity_discovery.domain.models import Activity, SavedSearch, WhatFilter, WhereFilter
from activity_discovery.domain.saved_searches import describe
from activity_discovery.domain.taxonomy import match_subcategories
from activity_discovery.errors import ActivitiesFetchError
from activity_discovery.providers.activities.base import ActivitiesProvider

logger = logging.getLogger(__name__)

Matcher = Callable[[str], List[str]]


class SearchController:
    """Owns the baseline and the Where/When/What slices of one search page.

    Every setter replaces one slice and recomputes ``results`` from scratch.
    Baseline snapshots are tagged with a fetch generation so that a slow
    response can never overwrite a newer one.
    """

    def __init__(self, matcher: Matcher = match_subcategories) -> None:
        self._matcher = matcher
        self.baseline: List[Activity] = []
        self.where = WhereFilter()
        self.when = ""
        self.what = WhatFilter()
        self.matched_subcategories: List[str] = []
        self.results: List[Activity] = []
        self.error: Optional[str] = None
        self.loading = False
        self._generation = 0

    # -- baseline -----------------------------------------------------------

    def begin_fetch(self) -> int:
        self._generation += 1
        self.loading = True
        return self._generation

    def complete_fetch(self, generation: int, activities: Sequence[Activity]) -> bool:
        if generation != self._generation:
            logger.warning(
                "discarding stale activities snapshot generation=%s latest=%s",
                generation,
                self._generation,
            )
            return False
        self.loading = False
        self.error = None
        self.set_baseline(activities)
        return True

    def fail_fetch(self, generation: int, exc: Exception) -> bool:
        if generation != self._generation:
            return False
        logger.error("activities fetch failed: %s", exc)
        self.loading = False
        self.error = "Erreur lors de la récupération des activités"
        self.set_baseline([])
        return True

    def load(self, provider: ActivitiesProvider) -> List[Activity]:
        generation = self.begin_fetch()
        try:
            activities = provider.fetch_activities()
        except ActivitiesFetchError as exc:
            self.fail_fetch(generation, exc)
            return self.results
        self.complete_fetch(generation, activities)
        return self.results

    def set_baseline(self, activities: Iterable[Activity]) -> List[Activity]:
        self.baseline = list(activities)
        return self._recompute()

    # -- where / when -------------------------------------------------------

    def set_where(self, where: WhereFilter) -> List[Activity]:
        self.where = self.where.merge(where)
        return self._recompute()

    def set_when(self, when: Optional[str]) -> List[Activity]:
        self.when = when or ""
        return self._recompute()

    # -- what ---------------------------------------------------------------

    def set_keyword(self, keyword: str) -> List[Activity]:
        self.what = self.what.with_keyword(keyword)
        self.matched_subcategories = self._matcher(keyword.strip().lower())
        return self._recompute()

    def toggle_subcategory(self, subcategory: str) -> List[Activity]:
        excluded = toggle_exclusion(
            self.what.excluded_subcategories, self.matched_subcategories, subcategory
        )
        self.what = self.what.with_exclusions(excluded)
        return self._recompute()

    def validate_what(self) -> List[Activity]:
        """Apply the last matched, non-excluded subcategory as the active category."""
        selection = resolve_selection(self.matched_subcategories, self.what.excluded_subcategories)
        if selection is None:
            self.what = self.what.with_selection(None, None)
        else:
            self.what = self.what.with_selection(*selection)
        return self._recompute()

    def select_category(self, category: Optional[str], subcategory: Optional[str] = None) -> List[Activity]:
        self.what = WhatFilter(keyword="", category=category or None, subcategory=subcategory or None)
        self.matched_subcategories = []
        return self._recompute()

    def set_what(self, what: WhatFilter) -> List[Activity]:
        if what.keyword != self.what.keyword:
            what = what.with_exclusions(())
            self.matched_subcategories = self._matcher(what.keyword.strip().lower())
        self.what = what
        return self._recompute()

    def apply_saved(self, search: SavedSearch) -> List[Activity]:
        """Load a saved filter set into the Where/When/What slices.

        The keyword goes through ``set_keyword`` first so stale exclusions are
        dropped. Saved exclusions are then restored only for subcategories the
        saved keyword still matches.
        """
        self.where = WhereFilter()
        self.set_where(search.where)
        self.set_when(search.when)
        self.set_keyword(search.what.keyword)
        excluded = tuple(s for s in search.what.excluded_subcategories if s in self.matched_subcategories)
        return self.set_what(replace(search.what, excluded_subcategories=excluded))

    def current_search(self, name: Optional[str] = None) -> SavedSearch:
        return SavedSearch(
            name=name or describe(self.where, self.when, self.what),
            where=self.where,
            when=self.when,
            what=self.what,
        )

    def reset(self) -> List[Activity]:
        self.where = WhereFilter()
        self.when = ""
        self.what = WhatFilter()
        self.matched_subcategories = []
        return self._recompute()

    # -- views --------------------------------------------------------------

    @property
    def has_active_search(self) -> bool:
        return filtering.has_active_search(self.where, self.when, self.what)

    def visible_results(self, today: date) -> List[Activity]:
        return filtering.active_results(self.results, today)

    def _recompute(self) -> List[Activity]:
        self.results = filtering.recompute(self.baseline, self.where, self.when, self.what)
        logger.debug("recomputed results=%s baseline=%s", len(self.results), len(self.baseline))
        return self.results
