"""
Security Utilities.

Telegram identity verification and session token helpers.

Telegram signs the identity payload it hands to the client. The server
recomputes the signature with a key derived from the bot token:

    secret_key = SHA256(bot_token)
    check_string = "\\n".join(f"{k}={v}" for k, v in sorted(payload) if k != "hash" and v)
    hash = hex(HMAC_SHA256(secret_key, check_string))

The comparison is constant-time and the payload must be fresh
(``auth_date`` no older than ``max_age_seconds``).
"""

import hashlib
import hmac
import secrets
import time
from collections.abc import Mapping
from typing import Any

from todo_miniapp.core.exceptions import AuthenticationError
from todo_miniapp.core.logging import get_logger

logger = get_logger(__name__)

HASH_FIELD = "hash"
AUTH_DATE_FIELD = "auth_date"
DEFAULT_MAX_AGE_SECONDS = 86400
SESSION_TOKEN_BYTES = 32


def _is_empty(value: Any) -> bool:
    # JavaScript truthiness: None, "", 0 and False count as empty
    return value is None or value == "" or value is False or value == 0


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_data_check_string(payload: Mapping[str, Any]) -> str:
    """
    Build the canonical check-string for a Telegram identity payload.

    Every field except ``hash`` is rendered as ``key=value``, sorted by key
    and joined with newlines. Falsy values (null, empty string, 0, false)
    are left out; booleans render as ``true``/``false``.
    """
    return "\n".join(
        f"{key}={_render(payload[key])}"
        for key in sorted(payload)
        if key != HASH_FIELD and not _is_empty(payload[key])
    )


def compute_telegram_hash(payload: Mapping[str, Any], bot_token: str) -> str:
    """Compute the hex HMAC-SHA256 tag Telegram would attach to ``payload``."""
    secret_key = hashlib.sha256(bot_token.encode("utf-8")).digest()
    check_string = build_data_check_string(payload)
    return hmac.new(
        secret_key,
        check_string.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_telegram_auth(
    payload: Mapping[str, Any],
    bot_token: str,
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
    now: float | None = None,
) -> dict[str, Any]:
    """
    Validate a Telegram identity payload.

    Args:
        payload: Field name to value mapping as sent by the client, including ``hash``
        bot_token: Shared bot secret
        max_age_seconds: Freshness window for ``auth_date``
        now: Current unix time (defaults to ``time.time()``)

    Returns:
        The payload without its ``hash`` field

    Raises:
        AuthenticationError: If the secret is unset, the tag is missing or wrong,
            or the payload is stale
    """
    if not bot_token:
        logger.error("Telegram bot token is not configured")
        raise AuthenticationError("Invalid Telegram authentication")

    claimed_hash = payload.get(HASH_FIELD)
    if not isinstance(claimed_hash, str) or not claimed_hash:
        logger.warning("Telegram auth payload has no hash")
        raise AuthenticationError("Invalid Telegram authentication")

    try:
        auth_date = int(payload[AUTH_DATE_FIELD])
    except (KeyError, TypeError, ValueError):
        logger.warning("Telegram auth payload has no valid auth_date")
        raise AuthenticationError("Invalid Telegram authentication")

    current = time.time() if now is None else now
    if current - auth_date > max_age_seconds:
        logger.warning(
            "Telegram auth payload expired",
            extra={"age_seconds": int(current - auth_date), "max_age_seconds": max_age_seconds},
        )
        raise AuthenticationError("Invalid Telegram authentication")

    expected_hash = compute_telegram_hash(payload, bot_token)
    if not hmac.compare_digest(expected_hash.encode("ascii"), claimed_hash.encode("utf-8")):
        logger.warning("Telegram auth hash mismatch", extra={"telegram_id": payload.get("id")})
        raise AuthenticationError("Invalid Telegram authentication")

    return {key: value for key, value in payload.items() if key != HASH_FIELD}


class TelegramAuthVerifier:
    """
    Credential verifier bound to a bot token and freshness window.

    Built once from configuration and injected into the login endpoint.
    """

    def __init__(self, bot_token: str, max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS) -> None:
        self._bot_token = bot_token
        self.max_age_seconds = max_age_seconds

    def verify(self, payload: Mapping[str, Any], now: float | None = None) -> dict[str, Any]:
        """Verify ``payload``; see verify_telegram_auth."""
        return verify_telegram_auth(
            payload,
            self._bot_token,
            max_age_seconds=self.max_age_seconds,
            now=now,
        )


def generate_session_token() -> str:
    """Generate an opaque, URL-safe session token."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)
