"""Shared test fixtures for the shrine test suite.

session_factory  (function scope)
    Fresh in-memory SQLite database per test with the schema created and the
    dev users (Alice, Bob, Charlie) seeded. StaticPool keeps every logical
    connection on the same in-memory database.

client  (function scope)
    AsyncClient wired to the FastAPI app with get_db overridden to use
    session_factory. Cleans up the override after the test.

For tests with no DB at all (dice engine), no fixture is needed.
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shrine.database import Base, get_db
from shrine.main import _DEV_USERS, app
from shrine.models import User


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    factory = async_sessionmaker(engine, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with factory() as db:
        for name in _DEV_USERS:
            db.add(User(display_name=name))
        await db.commit()

    yield factory

    await engine.dispose()


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.pop(get_db, None)

