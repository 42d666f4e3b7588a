"""
Palate — Tenant isolation guard.

Every authenticated read or write that targets a specific questionnaire or
product passes through here first.  The guard only compares ownership; it
never loads or mutates anything, so callers resolve the owning entity
themselves (for a question: its parent questionnaire).
"""

from __future__ import annotations

import enum
from typing import Any, TypeVar

import structlog

from palate.exceptions import ForbiddenError, NotFoundError

logger = structlog.get_logger("palate.tenant_guard")

E = TypeVar("E")


class AuthorizationResult(str, enum.Enum):
    OK = "ok"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


def authorize(account_id: str, entity: Any | None) -> AuthorizationResult:
    """Decide whether ``account_id`` may act on ``entity``.

    ``entity`` is whatever the record store returned (``None`` when the
    record is absent) and must expose an ``account_id`` attribute.
    """
    if entity is None:
        return AuthorizationResult.NOT_FOUND
    if entity.account_id != account_id:
        return AuthorizationResult.FORBIDDEN
    return AuthorizationResult.OK


def ensure_owned(
    account_id: str,
    entity: E | None,
    label: str,
    entity_id: str | None = None,
) -> E:
    """Raising form of :func:`authorize`; returns the entity unchanged."""
    result = authorize(account_id, entity)

    if result is AuthorizationResult.NOT_FOUND:
        raise NotFoundError(label, entity_id)

    if result is AuthorizationResult.FORBIDDEN:
        logger.warning(
            "tenant_guard_forbidden",
            account_id=account_id,
            entity=label,
            entity_id=entity_id,
        )
        raise ForbiddenError(label, entity_id)

    return entity
