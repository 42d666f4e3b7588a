"""Shared pytest fixtures for Palate tests."""
import os
import uuid
from contextlib import asynccontextmanager

# Settings are cached on first use, so the environment is fixed before any
# palate module is imported.
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("AUTH_JWT_SECRET", "palate-test-secret-0123456789abcdef")

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles

from palate.database import Base
from palate.models import Account, Product
from palate.store import MemoryRecordStore, SqlRecordStore
from palate.utils.tokens import create_access_token


@pytest.fixture
def store():
    return MemoryRecordStore()


class _WriteMissStore(MemoryRecordStore):
    """Reads succeed but every owner-keyed write matches nothing, as when a
    concurrent delete lands between the ownership check and the write."""

    async def update(self, kind, record_id, patch, owner_id=None):
        return None

    async def delete(self, kind, record_id, owner_id=None):
        return False


class _StaleReadStore(MemoryRecordStore):
    """``get`` misses Accounts that exist, as seen by a request that read
    before a concurrent first login committed."""

    async def get(self, kind, record_id):
        if kind is Account:
            return None
        return await super().get(kind, record_id)


@pytest.fixture
def write_miss_store():
    return _WriteMissStore()


@pytest.fixture
def stale_read_store():
    return _StaleReadStore()


# SQLite stands in for PostgreSQL so the SQL backend runs without a server.
@compiles(JSONB, "sqlite")
def _jsonb_as_sqlite_json(type_, compiler, **kw):
    return "JSON"


def _sqlite_engine(path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}")

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy own BEGIN so SAVEPOINTs work; enforce FK cascades.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


@asynccontextmanager
async def _sqlite_store(path):
    engine = _sqlite_engine(path)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    try:
        async with factory() as session:
            yield SqlRecordStore(session)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """SqlRecordStore over a throwaway SQLite file, one session per test."""
    async with _sqlite_store(tmp_path / "palate.db") as sql:
        yield sql


@pytest_asyncio.fixture(params=["memory", "sql"])
async def any_store(request, tmp_path):
    """Each backend in turn, for behaviour both must share."""
    if request.param == "memory":
        yield MemoryRecordStore()
        return
    async with _sqlite_store(tmp_path / "palate.db") as sql:
        yield sql


@pytest.fixture
def account_a():
    return f"acct-{uuid.uuid4()}"


@pytest.fixture
def account_b():
    return f"acct-{uuid.uuid4()}"


def _product(name, tags, account_id="acct-catalog"):
    return Product(id=str(uuid.uuid4()), account_id=account_id, name=name, tags=tags)


@pytest.fixture
def make_product():
    """Factory for unsaved products, enough for the recommendation engine."""
    return _product


@pytest.fixture
def cheese_catalog():
    """A small catalog, in listing order (newest first)."""
    return [
        _product("Aged Gouda", ["nutty", "aged", "sweet"]),
        _product("Cave Cheddar", ["sharp", "aged", "crumbly"]),
        _product("Brie de Meaux", ["mild", "creamy", "soft"]),
        _product("Truffle Pecorino", ["earthy", "salty"]),
        _product("Fresh Mozzarella", ["mild", "fresh"]),
    ]


@pytest.fixture
def auth_headers():
    """Build bearer headers for an account id."""

    def _headers(account_id, **claims):
        token = create_access_token(account_id, claims=claims or None)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def client(store):
    """TestClient whose requests all share one in-memory store."""
    from fastapi.testclient import TestClient

    from palate.main import app
    from palate.store import get_store

    async def _memory_store():
        return store

    app.dependency_overrides[get_store] = _memory_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
