"""
Error taxonomy.

Authorization never raises: policies return a ``Rejection`` value that the
route layer maps to a status code. Catalog and rating services raise the
``CatalogError`` subclasses below.
"""
from dataclasses import dataclass


UNAUTHENTICATED = "unauthenticated"
FORBIDDEN = "forbidden"
BAD_REQUEST = "bad_request"


@dataclass(frozen=True)
class Rejection:
    """Outcome of a failed authorization policy."""
    status_code: int
    kind: str
    detail: str

    @classmethod
    def unauthenticated(cls, detail: str = "Authentication required") -> "Rejection":
        return cls(status_code=401, kind=UNAUTHENTICATED, detail=detail)

    @classmethod
    def forbidden(cls, detail: str = "Forbidden") -> "Rejection":
        return cls(status_code=403, kind=FORBIDDEN, detail=detail)

    @classmethod
    def bad_request(cls, detail: str = "Missing resource identifier") -> "Rejection":
        return cls(status_code=400, kind=BAD_REQUEST, detail=detail)


class CatalogError(Exception):
    """Base class for catalog and rating failures."""


class InvalidDiscriminator(CatalogError):
    """An entity type outside the ratable set was supplied."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid entity type: {value}")


class StoreFailure(CatalogError):
    """A data-access error that is not otherwise classified."""


class NotFound(CatalogError):
    """A referenced catalog record does not exist."""


class Conflict(CatalogError):
    """A unique slug or code is already taken."""
