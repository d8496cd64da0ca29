"""Pytest fixtures for sports tracker tests.

This module provides test fixtures that ensure:
1. No external API calls are made (the CWA provider is never configured)
2. Each test gets a fresh in-memory SQLite database
3. Isolated test environment with controlled configuration
"""

import os

import pytest

# Set test environment BEFORE importing application modules
# This ensures no real services are contacted during test collection
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CWA_API_KEY"] = ""
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import httpx

from sports_tracker.api import create_app
from sports_tracker.auth.accounts import AccountService
from sports_tracker.database.connection import (
    close_db,
    create_tables,
    drop_tables,
    get_db,
    init_db,
)

PASSWORD = "secret1"


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from sports_tracker.config import get_settings
    from sports_tracker.weather.stations import get_station_registry

    get_settings.cache_clear()
    get_station_registry.cache_clear()
    yield
    get_settings.cache_clear()
    get_station_registry.cache_clear()


@pytest.fixture
async def database():
    """Fresh schema in a private in-memory database."""
    await init_db()
    await create_tables()
    yield
    await drop_tables()
    await close_db()


@pytest.fixture
async def db(database):
    """Database session for service-level tests."""
    async with get_db() as session:
        yield session


@pytest.fixture
async def client(database):
    """HTTP client wired straight into the ASGI app (no network)."""
    app = create_app()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


# =============================================================================
# Account Fixtures
# =============================================================================


@pytest.fixture
def accounts(db) -> AccountService:
    return AccountService(db)


@pytest.fixture
async def alice(accounts):
    """Registered user 'alice'."""
    return await accounts.register("alice", PASSWORD, "Alice")


@pytest.fixture
async def bob(accounts):
    """Registered user 'bob' without a display name."""
    return await accounts.register("bob", PASSWORD)


async def register_and_login(client: httpx.AsyncClient, username: str, display_name=None) -> dict:
    """Register through the API and return auth headers for the new user."""
    body = {"username": username, "password": PASSWORD}
    if display_name:
        body["displayName"] = display_name
    response = await client.post("/api/register", json=body)
    assert response.status_code == 201, response.text

    response = await client.post("/api/login", json={"username": username, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture
def login_as(client):
    """Register and log in a user by name; returns their auth headers."""

    async def _login_as(username: str, display_name=None) -> dict:
        return await register_and_login(client, username, display_name)

    return _login_as


@pytest.fixture
async def alice_headers(client):
    return await register_and_login(client, "alice", "Alice")


@pytest.fixture
async def bob_headers(client):
    return await register_and_login(client, "bob", "Bob")


# =============================================================================
# Weather Fixtures
# =============================================================================


@pytest.fixture
def cwa_observation() -> dict:
    """A trimmed O-A0003-001 response with two stations."""
    return {
        "success": "true",
        "records": {
            "Station": [
                {
                    "StationName": "臺北",
                    "StationId": "466920",
                    "ObsTime": {"DateTime": "2024-06-15T14:00:00+08:00"},
                    "WeatherElement": {
                        "Weather": "多雲",
                        "Now": {"Precipitation": 0.5},
                        "WindDirection": 90.0,
                        "WindSpeed": 2.3,
                        "AirTemperature": 31.2,
                        "RelativeHumidity": 68,
                        "AirPressure": 1005.8,
                    },
                },
                {
                    "StationName": "高雄",
                    "StationId": "467440",
                    "ObsTime": {"DateTime": "2024-06-15T14:00:00+08:00"},
                    "WeatherElement": {
                        "Weather": "-99",
                        "Now": {"Precipitation": -99.0},
                        "WindDirection": -99,
                        "WindSpeed": -99.0,
                        "AirTemperature": 30.1,
                        "RelativeHumidity": -99,
                        "AirPressure": 1004.2,
                    },
                },
            ]
        },
    }
