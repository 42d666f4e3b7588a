"""
Palate — Record store interface.

Every service talks to persistence through ``RecordStore``.  A *kind* is the
ORM model class of the records involved (``Questionnaire``, ``Product``...),
so the same interface serves the SQL backend and the in-memory backend.

Ownership is expressed through two tables:

* ``OWNER_FIELDS`` — kinds owned directly by an account.
* ``PARENT_FIELDS`` — kinds owned by a questionnaire (and so, transitively,
  by the questionnaire's account).

``update`` and ``delete`` accept an optional ``owner_id``.  When given, the
operation only matches a record owned by that account, so an authorization
check and the mutation that follows it cannot be split by a concurrent
ownership change.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from palate.models import Account, Product, Question, Questionnaire, Response

T = TypeVar("T")

OWNER_FIELDS: dict[type, str] = {
    Account: "id",
    Questionnaire: "account_id",
    Product: "account_id",
}

PARENT_FIELDS: dict[type, str] = {
    Question: "questionnaire_id",
    Response: "questionnaire_id",
}

# parent kind -> [(child kind, foreign key field)]; deletes cascade along these.
CASCADES: dict[type, list[tuple[type, str]]] = {
    Account: [(Questionnaire, "account_id"), (Product, "account_id")],
    Questionnaire: [(Question, "questionnaire_id"), (Response, "questionnaire_id")],
}

# Kinds that carry an ``updated_at`` column refreshed on every update.
TOUCHED_KINDS: tuple[type, ...] = (Account, Questionnaire)


class RecordStore(ABC):
    """Key-addressed async record store."""

    @abstractmethod
    async def get(self, kind: type[T], record_id: str) -> T | None:
        """Return the record or ``None`` when absent."""

    @abstractmethod
    async def list_by_owner(self, kind: type[T], owner_id: str) -> list[T]:
        """Records of ``kind`` owned by an account, newest first.

        Equal ``created_at`` values still list in a fixed order: insertion
        order in memory, descending id in SQL.
        """

    @abstractmethod
    async def list_by_parent(self, kind: type[T], parent_id: str) -> list[T]:
        """Children of a questionnaire.

        Questions come back by ``order`` ascending, then oldest first;
        responses newest first. Remaining ties break as in ``list_by_owner``.
        """

    @abstractmethod
    async def insert(self, kind: type[T], fields: dict[str, Any]) -> T:
        """Create a record; the store assigns ``id`` and timestamps.

        Raises ``StoreFailureError`` when ``fields`` names an id already taken.
        """

    @abstractmethod
    async def insert_or_get(self, kind: type[T], fields: dict[str, Any]) -> T:
        """Insert a record with the id given in ``fields``, or return the
        record already stored under that id (left unchanged).

        Safe against a concurrent insert of the same id.
        """

    @abstractmethod
    async def update(
        self,
        kind: type[T],
        record_id: str,
        patch: dict[str, Any],
        owner_id: str | None = None,
    ) -> T | None:
        """Apply ``patch``; ``None`` when nothing matched."""

    @abstractmethod
    async def delete(
        self,
        kind: type,
        record_id: str,
        owner_id: str | None = None,
    ) -> bool:
        """Remove a record and its owned children; ``False`` when nothing matched."""

    async def ping(self) -> None:
        """Raise if the backend is unreachable."""
        return None
