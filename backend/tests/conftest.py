"""
Jotter Backend: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets its own SQLite database file under tmp_path, an app
       built by create_app() from test Settings, and an httpx AsyncClient
       wired to it through ASGITransport (no server, no lifespan).

Fixture Hierarchy (all function-scoped):
    test_settings ── app ──┬── engine ── db_session
                           └── test_client ── register_user / auth_header
"""

import os

# Keep the module-level app in jotter.main away from any real configuration
os.environ.setdefault("JWT_SECRET", "test-module-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from jotter.config import Settings
from jotter.database import dispose_engine, init_models
from jotter.main import create_app

TEST_SECRET = "test-signing-secret"


@pytest.fixture
def test_settings(tmp_path):
    """
    Settings for one test: private database file, known secret, and the
    cheapest bcrypt cost so hashing does not dominate test time.
    """
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
        auto_create_tables=False,
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """A fresh application with its tables created."""
    application = create_app(test_settings)
    await init_models(application.state.engine)
    yield application
    await dispose_engine(application.state.engine)


@pytest.fixture
def engine(app):
    return app.state.engine


@pytest_asyncio.fixture
async def db_session(app):
    """A session on the test database, for store-level tests."""
    async with app.state.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(app):
    """
    Async HTTP test client talking to the app in-process.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def token_service(app):
    return app.state.token_service


async def register_and_login(client: AsyncClient, username: str, password: str) -> str:
    """Register a user through the API and return a bearer token for them."""
    registered = await client.post("/register", json={"username": username, "password": password})
    assert registered.status_code == 201, registered.text

    logged_in = await client.post("/login", json={"username": username, "password": password})
    assert logged_in.status_code == 200, logged_in.text
    return logged_in.json()["token"]


@pytest_asyncio.fixture
async def auth_header(test_client):
    """{'Authorization': 'Bearer <token>'} for user "alice"."""
    token = await register_and_login(test_client, "alice", "alicepassword123")
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def second_auth_header(test_client):
    """Auth header for a second user, "bob"."""
    token = await register_and_login(test_client, "bob", "bobpassword456")
    return {"Authorization": f"Bearer {token}"}
