"""
Persistence errors raised by the entity context, repositories and the unit of work.
"""

from typing import Any, Optional


class RepositoryError(Exception):
    """Base class for persistence errors; `code` is the response envelope code."""

    code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(RepositoryError):
    """Requested identifier does not exist at read or delete time."""

    code = 404

    def __init__(self, model: type, entity_id: Any):
        super().__init__(f"{model.__name__} {entity_id} not found")
        self.model = model
        self.entity_id = entity_id


class ConcurrencyConflict(RepositoryError):
    """Stale version token on update; caller should re-read and retry."""

    code = 409

    def __init__(self, model: type, entity_id: Any, expected: Optional[int], actual: Optional[int]):
        super().__init__(
            f"{model.__name__} {entity_id} was modified concurrently "
            f"(version {expected}, stored {actual})"
        )
        self.model = model
        self.entity_id = entity_id
        self.expected = expected
        self.actual = actual


class PersistenceError(RepositoryError):
    """Underlying store failure during commit; the transaction was rolled back."""

    code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class UnitOfWorkStateError(RepositoryError):
    """Operation not valid in the unit of work's current state."""

    code = 500
