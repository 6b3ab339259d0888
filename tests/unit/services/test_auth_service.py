"""
Unit Tests for Auth Service.

The verifier runs for real with the test bot token; the user repository
and session store are mocked.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from todo_miniapp.core.exceptions import AuthenticationError, AuthorizationError
from todo_miniapp.core.security import TelegramAuthVerifier
from todo_miniapp.services.auth import AuthService, is_user_allowed


@pytest.fixture
def sessions():
    store = MagicMock()
    store.create = AsyncMock(return_value="session-token")
    return store


@pytest.fixture
def stored_user():
    return MagicMock(
        id=1,
        telegram_id=987654321,
        first_name="Ada",
        last_name="Lovelace",
        username="ada",
    )


def _service(bot_token, sessions, allowed_users=()):
    return AuthService(
        AsyncMock(),
        verifier=TelegramAuthVerifier(bot_token),
        sessions=sessions,
        allowed_users=allowed_users,
    )


class TestIsUserAllowed:
    def test_empty_list_allows_everyone(self):
        assert is_user_allowed(42, [])

    def test_listed_user_allowed(self):
        assert is_user_allowed(42, [1, 42])

    def test_unlisted_user_denied(self):
        assert not is_user_allowed(43, [1, 42])


class TestLogin:
    """Tests for AuthService.login."""

    async def test_valid_payload_opens_session(self, bot_token, telegram_payload, sessions, stored_user):
        service = _service(bot_token, sessions)

        with patch.object(service.user_repo, "upsert", return_value=stored_user) as mock_upsert:
            token, user = await service.login(telegram_payload)

        mock_upsert.assert_called_once_with(
            telegram_id=987654321,
            first_name="Ada",
            last_name="Lovelace",
            username="ada",
        )
        sessions.create.assert_awaited_once_with(stored_user)
        assert token == "session-token"
        assert user.user_id == 1
        assert user.telegram_id == 987654321

    async def test_tampered_payload_rejected(self, bot_token, telegram_payload, sessions):
        service = _service(bot_token, sessions)
        telegram_payload["first_name"] = "Eve"

        with patch.object(service.user_repo, "upsert") as mock_upsert:
            with pytest.raises(AuthenticationError, match="Invalid Telegram authentication"):
                await service.login(telegram_payload)

        mock_upsert.assert_not_called()
        sessions.create.assert_not_called()

    async def test_stale_payload_rejected(self, bot_token, sign_payload, sessions):
        service = _service(bot_token, sessions)

        with pytest.raises(AuthenticationError):
            await service.login(sign_payload(auth_date=1000))

    async def test_wrong_bot_token_rejected(self, telegram_payload, sessions):
        service = _service("999:OTHER-TOKEN", sessions)

        with pytest.raises(AuthenticationError):
            await service.login(telegram_payload)

    async def test_signed_payload_without_id_rejected(self, bot_token, sign_payload, sessions):
        service = _service(bot_token, sessions)

        with pytest.raises(AuthenticationError):
            await service.login(sign_payload(id=None))

    async def test_user_outside_allow_list_forbidden(self, bot_token, telegram_payload, sessions):
        service = _service(bot_token, sessions, allowed_users=[1, 2])

        with patch.object(service.user_repo, "upsert") as mock_upsert:
            with pytest.raises(AuthorizationError):
                await service.login(telegram_payload)

        mock_upsert.assert_not_called()

    async def test_user_on_allow_list_admitted(self, bot_token, telegram_payload, sessions, stored_user):
        service = _service(bot_token, sessions, allowed_users=[987654321])

        with patch.object(service.user_repo, "upsert", return_value=stored_user):
            token, _ = await service.login(telegram_payload)

        assert token == "session-token"
