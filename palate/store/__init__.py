"""
Palate — Record store selection.

``STORE_BACKEND`` picks the implementation; the rest of the code only sees
``RecordStore``.  ``get_store`` is the FastAPI dependency that hands each
request its store (for the SQL backend: a fresh session in its own
transaction).
"""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import Request

from palate.config import get_settings
from palate.database import session_scope
from palate.store.base import RecordStore
from palate.store.memory import MemoryRecordStore
from palate.store.sql import SqlRecordStore

__all__ = ["RecordStore", "MemoryRecordStore", "SqlRecordStore", "get_store"]


async def get_store(request: Request) -> AsyncIterator[RecordStore]:
    """Yield the request-scoped record store.

    Usage in a FastAPI route::

        @router.get("/items")
        async def list_items(store: RecordStore = Depends(get_store)):
            ...
    """
    if get_settings().STORE_BACKEND == "memory":
        yield request.app.state.memory_store
        return

    async with session_scope() as session:
        yield SqlRecordStore(session)
