"""
Shared fixtures: a fresh app on an in-memory SQLite database per test.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from database.models import Category, init_models
from main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret="test-secret",
        jwt_expiry_seconds=3600,
        bcrypt_rounds=4,
        environment="test",
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    await init_models(application.state.ctx.engine)
    yield application
    await application.state.ctx.close()


@pytest.fixture
def ctx(app):
    return app.state.ctx


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def alice() -> dict:
    return {
        "username": "alice",
        "email": "alice@example.com",
        "password": "secret123",
        "monthlyIncome": 3000,
    }


@pytest_asyncio.fixture
async def alice_token(client, alice) -> str:
    response = await client.post("/register", json=alice)
    assert response.status_code == 201
    return response.json()["token"]


@pytest_asyncio.fixture
async def category_id(ctx) -> str:
    category = Category(id=uuid.uuid4(), category_name="Groceries")
    async with ctx.session_factory() as session:
        session.add(category)
        await session.commit()
    return str(category.id)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
