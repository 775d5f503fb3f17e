"""
Catalog error taxonomy

Absence is not an error here: stores and services return None / False for a
missing id and the routers turn that into a 404. The classes below cover the
failures a caller can recover from.
"""


class CatalogError(Exception):
    """Base class for recoverable catalog errors"""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailure(CatalogError):
    """Input violates a data-model invariant (rating range, content length...)"""


class Conflict(CatalogError):
    """Duplicate username/email, second review of a movie, watchlist duplicate"""


class PermissionDenied(CatalogError):
    """Caller tried to mutate a record it does not own"""
