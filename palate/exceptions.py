"""
Palate — Domain error taxonomy.

Services raise these; the HTTP layer in ``palate.main`` maps each kind to a
status code.  Nothing here knows about HTTP.
"""

from __future__ import annotations


class PalateError(Exception):
    """Base class for every error the core raises on purpose."""


class ValidationFailedError(PalateError):
    """Malformed input, reported with the offending field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(PalateError):
    """The referenced entity is absent (or hidden from the public path)."""

    def __init__(self, entity: str, entity_id: str | None = None) -> None:
        detail = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        super().__init__(detail)
        self.entity = entity
        self.entity_id = entity_id


class ForbiddenError(PalateError):
    """The entity exists but belongs to another account."""

    def __init__(self, entity: str, entity_id: str | None = None) -> None:
        super().__init__(f"{entity} belongs to another account")
        self.entity = entity
        self.entity_id = entity_id


class StoreFailureError(PalateError):
    """The record store could not complete an operation."""
