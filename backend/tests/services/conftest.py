"""Service fixtures: a throwaway SQLite store, the ASGI client, storefront seed rows.

Invariants:
    - Each test runs against its own in-memory database (one shared connection)
    - Requests and fixtures see the same store: get_db is overridden and the
      module-level db_manager points at the test engine
    - Seed rows follow the storefront scenario: account 42, products 7 and 9

Design Decisions:
    - SQLite ignores FOR UPDATE; row locking is exercised only against Postgres
    - Store faults are raised from before_cursor_execute, so failures travel
      the real SQLAlchemy error path instead of a patched method
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

import runx.infrastructure.database as database
import runx.models  # noqa: F401
from runx.config import Settings, get_settings
from runx.db.base import Base
from runx.infrastructure.database import DatabaseSessionManager, get_db
from runx.main import app
from runx.models.account import Account
from runx.models.cart_line import CartLine
from runx.models.product import Product
from runx.services.accounts import hash_password

ACCOUNT_ID = 42
ACCOUNT_EMAIL = "ana@runx.test"
ACCOUNT_PASSWORD = "s3creta"


@pytest.fixture
async def store_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://", poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(store_engine):
    return async_sessionmaker(store_engine, expire_on_commit=False)


@pytest.fixture
async def store_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(store_engine, session_factory, monkeypatch):
    """ASGI client bound to the test store."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = store_engine
    manager._session_factory = session_factory
    monkeypatch.setattr(database, "db_manager", manager)

    async def _session_per_request():
        async with manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = _session_per_request
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://runx.test") as http:
        yield http
    app.dependency_overrides.clear()


@pytest.fixture
def override_settings():
    """Swap the Settings seen by route dependencies for the current test."""
    def _apply(**overrides) -> Settings:
        settings = Settings(**overrides)
        app.dependency_overrides[get_settings] = lambda: settings
        return settings
    yield _apply
    app.dependency_overrides.pop(get_settings, None)


@pytest.fixture
async def account(store_session):
    """Account 42 without a second factor."""
    acc = Account(
        id=ACCOUNT_ID,
        name="Ana",
        email=ACCOUNT_EMAIL,
        password_hash=hash_password(ACCOUNT_PASSWORD, rounds=4),
    )
    store_session.add(acc)
    await store_session.commit()
    return acc


@pytest.fixture
async def products(store_session):
    """Products 7 and 9, both priced 13.99."""
    items = [
        Product(
            id=7, name="Zapatilla Trail", price=13.99,
            description="Trail running", sizes="38,39,40", image="trail.png",
        ),
        Product(
            id=9, name="Calcetines Pro", price=13.99,
            description="Running socks", sizes="M,L", image="socks.png",
        ),
    ]
    store_session.add_all(items)
    await store_session.commit()
    return items


@pytest.fixture
async def cart(store_session, account, products):
    """Account 42 cart: product 7 x2, product 9 x1."""
    lines = [
        CartLine(account_id=ACCOUNT_ID, product_id=7, quantity=2),
        CartLine(account_id=ACCOUNT_ID, product_id=9, quantity=1),
    ]
    store_session.add_all(lines)
    await store_session.commit()
    return lines


@pytest.fixture
def store_fault(store_engine):
    """Make every statement starting with a given prefix fail like a broken store."""
    installed = []

    def _inject(statement_prefix: str) -> None:
        prefix = statement_prefix.upper()

        def _fail(conn, cursor, statement, parameters, context, executemany):
            if statement.lstrip().upper().startswith(prefix):
                raise OperationalError(
                    statement, parameters, Exception("simulated store fault"),
                )

        event.listen(store_engine.sync_engine, "before_cursor_execute", _fail)
        installed.append(_fail)

    yield _inject
    for fn in installed:
        event.remove(store_engine.sync_engine, "before_cursor_execute", fn)
