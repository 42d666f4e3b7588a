"""
Palate — SQLAlchemy record store.

Wraps one request-scoped ``AsyncSession``.  Cascading deletes are left to
the database (``ON DELETE CASCADE`` on every child foreign key), and every
``SQLAlchemyError`` is surfaced as ``StoreFailureError``.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from sqlalchemy import delete, inspect, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from palate.database import utcnow
from palate.exceptions import StoreFailureError
from palate.models import Question, Questionnaire, Response
from palate.store.base import (
    CASCADES,
    OWNER_FIELDS,
    PARENT_FIELDS,
    TOUCHED_KINDS,
    RecordStore,
    T,
)

logger = structlog.get_logger("palate.store.sql")


@contextmanager
def _store_errors(operation: str, kind: type) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(
            "store_operation_failed",
            operation=operation,
            kind=kind.__name__,
            error=str(exc),
        )
        raise StoreFailureError(f"{operation} {kind.__name__} failed") from exc


class SqlRecordStore(RecordStore):
    """Record store backed by a SQLAlchemy async session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ── Helpers ───────────────────────────────────────────────────────

    @staticmethod
    def _owner_clause(kind: type, owner_id: str):
        """WHERE clause restricting ``kind`` to records owned by an account."""
        if kind in OWNER_FIELDS:
            return getattr(kind, OWNER_FIELDS[kind]) == owner_id
        parent_column = getattr(kind, PARENT_FIELDS[kind])
        return parent_column.in_(
            select(Questionnaire.id).where(Questionnaire.account_id == owner_id)
        )

    # ── Reads ─────────────────────────────────────────────────────────

    async def get(self, kind: type[T], record_id: str) -> T | None:
        with _store_errors("get", kind):
            return await self.session.get(kind, record_id)

    async def list_by_owner(self, kind: type[T], owner_id: str) -> list[T]:
        stmt = (
            select(kind)
            .where(getattr(kind, OWNER_FIELDS[kind]) == owner_id)
            .order_by(kind.created_at.desc(), kind.id.desc())
        )
        with _store_errors("list_by_owner", kind):
            result = await self.session.execute(stmt)
            return list(result.scalars().all())

    async def list_by_parent(self, kind: type[T], parent_id: str) -> list[T]:
        stmt = select(kind).where(getattr(kind, PARENT_FIELDS[kind]) == parent_id)
        if kind is Question:
            stmt = stmt.order_by(
                Question.order.asc(), Question.created_at.asc(), Question.id.asc()
            )
        elif kind is Response:
            stmt = stmt.order_by(Response.created_at.desc(), Response.id.desc())

        with _store_errors("list_by_parent", kind):
            result = await self.session.execute(stmt)
            return list(result.scalars().all())

    # ── Writes ────────────────────────────────────────────────────────

    async def insert(self, kind: type[T], fields: dict[str, Any]) -> T:
        record = kind(**fields)
        with _store_errors("insert", kind):
            self.session.add(record)
            await self.session.flush()
        return record

    async def insert_or_get(self, kind: type[T], fields: dict[str, Any]) -> T:
        with _store_errors("insert_or_get", kind):
            existing = await self.session.get(kind, fields["id"])
            if existing is not None:
                return existing

            record = kind(**fields)
            try:
                async with self.session.begin_nested():
                    self.session.add(record)
                return record
            except IntegrityError:
                # Lost the race to a concurrent insert of the same id.
                existing = await self.session.get(kind, fields["id"])
                if existing is None:
                    raise
                logger.info(
                    "insert_conflict_resolved",
                    kind=kind.__name__,
                    record_id=fields["id"],
                )
                return existing

    async def update(
        self,
        kind: type[T],
        record_id: str,
        patch: dict[str, Any],
        owner_id: str | None = None,
    ) -> T | None:
        values = dict(patch)
        if kind in TOUCHED_KINDS:
            values["updated_at"] = utcnow()

        if not values:
            # Nothing to write; still honour the owner condition.
            stmt = select(kind).where(kind.id == record_id)
            if owner_id is not None:
                stmt = stmt.where(self._owner_clause(kind, owner_id))
            with _store_errors("update", kind):
                result = await self.session.execute(stmt)
                return result.scalar_one_or_none()

        stmt = update(kind).where(kind.id == record_id)
        if owner_id is not None:
            stmt = stmt.where(self._owner_clause(kind, owner_id))
        stmt = (
            stmt.values(**values)
            .returning(kind)
            .execution_options(populate_existing=True)
        )

        with _store_errors("update", kind):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def delete(
        self,
        kind: type,
        record_id: str,
        owner_id: str | None = None,
    ) -> bool:
        stmt = delete(kind).where(kind.id == record_id)
        if owner_id is not None:
            stmt = stmt.where(self._owner_clause(kind, owner_id))
        stmt = stmt.execution_options(synchronize_session=False)

        with _store_errors("delete", kind):
            result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return False

        self._forget(kind, record_id)
        return True

    def _forget(self, kind: type, record_id: str) -> None:
        """Drop a deleted record and its cascaded children from the
        session's identity map, so later reads go to the database."""
        # Read loaded state only; touching attributes could trigger a load.
        for obj in list(self.session.identity_map.values()):
            if isinstance(obj, kind) and inspect(obj).identity == (record_id,):
                self.session.expunge(obj)
        for child_kind, field in CASCADES.get(kind, []):
            children = [
                inspect(obj).identity[0]
                for obj in self.session.identity_map.values()
                if isinstance(obj, child_kind)
                and inspect(obj).dict.get(field) == record_id
            ]
            for child_id in children:
                self._forget(child_kind, child_id)

    async def ping(self) -> None:
        with _store_errors("ping", type(self)):
            await self.session.execute(text("SELECT 1"))
