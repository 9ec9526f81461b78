"""
Shared fixtures for the shop service tests.

Every test gets its own SQLite database file, so tests never see each
other's catalog, carts or users.
"""
import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from shop_service.db.database import get_db
from shop_service.db.init_db import init_db
from shop_service.main import app
from tests.factories import make_item


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'shop.db'}", poolclass=NullPool)
    asyncio.run(init_db(bind=engine))
    yield sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def run_db(session_factory):
    """Run ``fn(db, *args)`` in a fresh session and return its result."""

    def runner(fn, *args, **kwargs):
        async def call():
            async with session_factory() as db:
                return await fn(db, *args, **kwargs)
        return asyncio.run(call())

    return runner


@pytest.fixture
def test_client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_client(test_client: TestClient):
    """Client whose catalog holds a shoe, a hat and a sock."""
    response = test_client.post(
        "/add-dummy-items",
        json=[
            make_item("i1", "Running Shoe"),
            make_item("i2", "Hat", price=15.0),
            make_item("i3", "Wool Sock", price=4.5, currency="EUR"),
        ],
    )
    assert response.status_code == 200
    return test_client
