from __future__ import annotations


class ActivitiesFetchError(RuntimeError):
    """The activity collaborator could not deliver a snapshot."""


class AuthenticationRequired(PermissionError):
    """A favorite or saved-search operation was attempted without a session."""


class FavoritesError(RuntimeError):
    pass


class SavedSearchLimitReached(ValueError):
    pass


class SavedSearchNotFound(LookupError):
    pass
