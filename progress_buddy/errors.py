"""Failure taxonomy raised by the persistence layer."""
from __future__ import annotations


class StoreError(Exception):
    """Base class for every failure raised by :class:`progress_buddy.db.Store`."""


class InitializationError(StoreError):
    """Storage could not be created or opened. Fatal to startup."""


class QueryError(StoreError):
    """A statement failed: malformed SQL or a constraint violation.

    The driver exception is kept as ``__cause__``.
    """


class ValidationError(QueryError):
    """A required field is missing or blank."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} is required")


class NotFoundError(QueryError):
    """The referenced entity does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")
