"""
Auth Schemas.

Telegram identity payload, session user context and auth responses.
"""

from pydantic import BaseModel, ConfigDict, Field

from todo_miniapp.schemas.base import ApiResponse


class TelegramIdentity(BaseModel):
    """Verified Telegram identity (the payload minus its hash)."""

    id: int
    first_name: str = ""
    last_name: str | None = None
    username: str | None = None
    photo_url: str | None = None
    auth_date: int

    model_config = ConfigDict(extra="ignore")


class SessionUser(BaseModel):
    """
    User context resolved from a session token.

    ``user_id`` is the internal primary key used to scope every task query;
    ``telegram_id`` is the external identity shown to the client.
    """

    user_id: int
    telegram_id: int
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserRead(BaseModel):
    """User as the front end sees it: ``id`` is the Telegram id."""

    id: int = Field(description="Telegram user id")
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None

    @classmethod
    def from_session_user(cls, user: SessionUser) -> "UserRead":
        return cls(
            id=user.telegram_id,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
        )


class AuthResponse(ApiResponse):
    user: UserRead | None = None


class ClientConfigResponse(BaseModel):
    """Public client configuration served by GET /api/config."""

    botUsername: str | None = None
    appUrl: str
