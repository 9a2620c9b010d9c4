import asyncio
import datetime
import os

# Keep the application's module-level engine away from any real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("PERSIST_INSIGHTS", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from smartspend import models
from smartspend.database import get_db, init_db
from smartspend.main import app


@pytest.fixture
def make_txn():
    """
    Builds unsaved Transaction rows for the pure analysis functions.
    """
    counter = {"id": 0}

    def _make(category, amount, when, type="expense", description=""):
        counter["id"] += 1
        return models.Transaction(
            id=counter["id"],
            user_id=1,
            type=type,
            category=category,
            description=description,
            amount=amount,
            transaction_date=when,
        )

    return _make


@pytest.fixture
def engine(tmp_path):
    """
    File-backed SQLite per test; NullPool so no connection outlives its event loop.
    """
    url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    engine = create_async_engine(url, poolclass=NullPool)
    asyncio.run(init_db(engine))
    return engine


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register_and_login(client):
    """
    Registers a user through the action endpoint and returns its session token.
    """
    def _go(username="ada", email="ada@example.com", password="s3cret!"):
        resp = client.post("/api", json={
            "action": "register",
            "username": username,
            "email": email,
            "password": password,
            "phone": "08030000000",
            "fullName": "Ada Obi",
        })
        assert resp.json()["success"] is True
        resp = client.post("/api", json={"action": "login", "username": username, "password": password})
        body = resp.json()
        assert body["success"] is True
        return body["sessionToken"]

    return _go


@pytest.fixture
def now():
    return datetime.datetime.utcnow()
