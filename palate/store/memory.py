"""
Palate — In-memory record store.

Holds ORM model instances (never attached to a session) in plain dicts.
Used for local development (``STORE_BACKEND=memory``) and the test suite.
Insertion order is tracked explicitly so records created in the same
instant still list in a fixed order.
"""

from __future__ import annotations

import itertools
from typing import Any

import structlog

from palate.database import new_id, utcnow
from palate.exceptions import StoreFailureError
from palate.models import Account, Question, Questionnaire
from palate.models.account import DEFAULT_BRAND_COLOR
from palate.store.base import (
    CASCADES,
    OWNER_FIELDS,
    PARENT_FIELDS,
    TOUCHED_KINDS,
    RecordStore,
    T,
)

logger = structlog.get_logger("palate.store.memory")

# Non-null column defaults normally applied at flush time.
_DEFAULTS: dict[type, dict[str, Any]] = {
    Account: {"brand_color": DEFAULT_BRAND_COLOR},
    Questionnaire: {"is_published": False},
    Question: {"order": 0},
}


class MemoryRecordStore(RecordStore):
    """Process-local store; one instance is the whole database."""

    def __init__(self) -> None:
        self._tables: dict[type, dict[str, Any]] = {}
        self._sequence: dict[str, int] = {}
        self._counter = itertools.count()

    def _table(self, kind: type) -> dict[str, Any]:
        return self._tables.setdefault(kind, {})

    def _owned_by(self, kind: type, record: Any, owner_id: str) -> bool:
        if kind in OWNER_FIELDS:
            return getattr(record, OWNER_FIELDS[kind]) == owner_id
        parent = self._table(Questionnaire).get(getattr(record, PARENT_FIELDS[kind]))
        return parent is not None and parent.account_id == owner_id

    def _newest_first(self, records: list[Any]) -> list[Any]:
        return sorted(
            records,
            key=lambda r: (r.created_at, self._sequence[r.id]),
            reverse=True,
        )

    # ── Reads ─────────────────────────────────────────────────────────

    async def get(self, kind: type[T], record_id: str) -> T | None:
        return self._table(kind).get(record_id)

    async def list_by_owner(self, kind: type[T], owner_id: str) -> list[T]:
        field = OWNER_FIELDS[kind]
        owned = [r for r in self._table(kind).values() if getattr(r, field) == owner_id]
        return self._newest_first(owned)

    async def list_by_parent(self, kind: type[T], parent_id: str) -> list[T]:
        field = PARENT_FIELDS[kind]
        children = [r for r in self._table(kind).values() if getattr(r, field) == parent_id]
        if kind is Question:
            return sorted(children, key=lambda q: (q.order, self._sequence[q.id]))
        return self._newest_first(children)

    # ── Writes ────────────────────────────────────────────────────────

    async def insert(self, kind: type[T], fields: dict[str, Any]) -> T:
        values = {**_DEFAULTS.get(kind, {}), **fields}
        values.setdefault("id", new_id())
        if values["id"] in self._table(kind):
            logger.error(
                "store_operation_failed",
                operation="insert",
                kind=kind.__name__,
                error="duplicate id",
            )
            raise StoreFailureError(f"insert {kind.__name__} failed")

        values["created_at"] = utcnow()
        if kind in TOUCHED_KINDS:
            values["updated_at"] = values["created_at"]

        record = kind(**values)
        self._table(kind)[record.id] = record
        self._sequence[record.id] = next(self._counter)
        return record

    async def insert_or_get(self, kind: type[T], fields: dict[str, Any]) -> T:
        existing = self._table(kind).get(fields["id"])
        if existing is not None:
            return existing
        return await self.insert(kind, fields)

    async def update(
        self,
        kind: type[T],
        record_id: str,
        patch: dict[str, Any],
        owner_id: str | None = None,
    ) -> T | None:
        record = self._table(kind).get(record_id)
        if record is None:
            return None
        if owner_id is not None and not self._owned_by(kind, record, owner_id):
            return None

        for field, value in patch.items():
            setattr(record, field, value)
        if kind in TOUCHED_KINDS:
            record.updated_at = utcnow()
        return record

    async def delete(
        self,
        kind: type,
        record_id: str,
        owner_id: str | None = None,
    ) -> bool:
        record = self._table(kind).get(record_id)
        if record is None:
            return False
        if owner_id is not None and not self._owned_by(kind, record, owner_id):
            return False

        self._cascade(kind, record_id)
        return True

    def _cascade(self, kind: type, record_id: str) -> None:
        for child_kind, field in CASCADES.get(kind, []):
            child_ids = [
                r.id for r in self._table(child_kind).values()
                if getattr(r, field) == record_id
            ]
            for child_id in child_ids:
                self._cascade(child_kind, child_id)
        del self._table(kind)[record_id]
        self._sequence.pop(record_id, None)
        logger.debug("record_deleted", kind=kind.__name__, record_id=record_id)
