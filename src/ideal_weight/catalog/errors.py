"""Exceptions raised while resolving the exercise catalog."""


class CatalogError(Exception):
    """Base class for catalog resolution failures."""

    pass


class NoExercisesAvailableError(CatalogError):
    """Raised when the authoritative source yields zero valid exercises."""

    pass


class CatalogIntegrityError(CatalogError):
    """Raised when split catalog files do not line up (partial data)."""

    pass


class ManifestError(CatalogError):
    """Raised when the data manifest is malformed or lacks a required file."""

    pass


class UnknownExerciseError(CatalogError, KeyError):
    """Raised when an exercise id is not present in a catalog snapshot."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead
        return str(self.args[0]) if self.args else ""


class TransportError(CatalogError):
    """
    Raised for non-success HTTP responses from a catalog backend.

    Network-level failures (connection refused, timeouts) are not wrapped;
    they propagate as the HTTP library raised them.
    """

    def __init__(self, message: str, status: int | None = None, url: str | None = None):
        super().__init__(message)
        self.status = status
        self.url = url
