"""Catalog error taxonomy.

"Not found" is never an exception here: repositories answer ``None`` or
``False`` for unknown ids. Malformed input is rejected by the pydantic
models before it reaches a repository. What remains are failures the core
cannot recover from, plus the guards around the administrative reseed.
"""


class CatalogError(Exception):
    """Base class for all catalog errors."""


class BackendFailure(CatalogError):
    """The storage backend is unreachable or rejected a valid operation."""

    def __init__(self, operation: str, cause: Exception | None = None) -> None:
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Storage backend failed during '{operation}'{detail}")


class SeedingUnavailableError(CatalogError):
    """Reseeding was requested while the in-memory backend is active."""


class SeedInProgressError(CatalogError):
    """Another worker currently holds the seed lock."""
