"""Pytest configuration and shared fixtures.

Each test gets its own in-memory SQLite database; the app's ``get_db``
dependency is pointed at it.
"""
import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["OTLP_ENDPOINT"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import app
from shared.config.database import Base, get_db
from shared.security.jwt_handler import create_access_token
from services.catalog_service.models import Country, Type
from services.product_service.models import Product


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    token, _ = create_access_token({"id": 1, "username": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def catalog(session_factory) -> dict:
    """One type, one country and two products priced 10 each."""
    async with session_factory() as session:
        fruit = Type(name="Fruit")
        ukraine = Country(name="Ukraine")
        session.add_all([fruit, ukraine])
        await session.flush()
        apple = Product(name="Apple", alias="apple", type_id=fruit.id, country_id=ukraine.id, price=10)
        pear = Product(name="Pear", alias="pear", type_id=fruit.id, country_id=ukraine.id, price=10)
        session.add_all([apple, pear])
        await session.commit()
        return {
            "type_id": fruit.id,
            "country_id": ukraine.id,
            "apple_id": apple.id,
            "pear_id": pear.id,
        }
