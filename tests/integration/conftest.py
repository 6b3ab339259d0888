"""
Integration Test Fixtures.

Fixtures for integration tests - real SQLite database, real services,
real HTTP stack through httpx's ASGI transport. These build on the root
conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from todo_miniapp.core.database import Database
from todo_miniapp.core.dependencies import get_verifier
from todo_miniapp.core.security import TelegramAuthVerifier
from todo_miniapp.models.user import User
from todo_miniapp.repositories.user import UserRepository
from todo_miniapp.services.session import SessionStore

COOKIE_NAME = "todo_session"


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def app(database: Database, bot_token: str):
    """
    Application wired to the test database and a verifier bound to the
    test bot token.
    """
    from todo_miniapp.main import create_app

    application = create_app(database=database)
    application.dependency_overrides[get_verifier] = lambda: TelegramAuthVerifier(bot_token)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Unauthenticated test client.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


async def create_user_session(
    database: Database,
    telegram_id: int,
    first_name: str = "Test",
) -> tuple[User, str]:
    """Insert a user and open a session for it. Returns (user, token)."""
    async with database.session() as session:
        user = await UserRepository(session).upsert(telegram_id, first_name)
        token = await SessionStore(session).create(user)
        await session.commit()
    return user, token


@pytest.fixture
async def user_session(database: Database) -> tuple[User, str]:
    return await create_user_session(database, telegram_id=1001, first_name="Alice")


@pytest.fixture
async def auth_client(app, user_session) -> AsyncGenerator[AsyncClient, None]:
    """
    Client holding a valid session cookie for Alice.

    Usage:
        async def test_list(auth_client: AsyncClient):
            response = await auth_client.get("/api/tasks")
    """
    _, token = user_session
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={COOKIE_NAME: token},
    ) as test_client:
        yield test_client


@pytest.fixture
async def other_client(app, database: Database) -> AsyncGenerator[AsyncClient, None]:
    """Client holding a valid session cookie for a second user, Bob."""
    _, token = await create_user_session(database, telegram_id=2002, first_name="Bob")
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={COOKIE_NAME: token},
    ) as test_client:
        yield test_client


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """Assert API response is successful and return its JSON."""
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is an error and return its JSON."""
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error"), f"Missing error message: {data}"

        if expected_code:
            assert data.get("code") == expected_code, (
                f"Expected error code {expected_code}, got {data.get('code')}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
