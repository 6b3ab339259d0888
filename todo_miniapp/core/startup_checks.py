"""
Startup Security Validation.

Checks security invariants before the application accepts traffic. If
any check fails the application refuses to start with a clear error.

Called during FastAPI lifespan initialization.
"""

from todo_miniapp.core.config import AppConfig, Settings, get_app_config, get_settings
from todo_miniapp.core.logging import get_logger

logger = get_logger(__name__)


class StartupSecurityError(RuntimeError):
    """Raised when a startup security check fails."""

    pass


def run_startup_checks(
    app_config: AppConfig | None = None,
    settings: Settings | None = None,
) -> None:
    """
    Validate all security invariants at startup.

    Outside production a missing bot token is only a warning, so the
    server can run locally without Telegram.

    Raises:
        StartupSecurityError: If any check fails
    """
    app_config = app_config or get_app_config()
    settings = settings or get_settings()
    environment = app_config.application.environment
    is_production = environment == "production"

    errors: list[str] = []

    _check_bot_token(settings, app_config, is_production, errors)
    _check_production_safety(app_config, is_production, errors)

    if errors:
        for error in errors:
            logger.error("Startup security check failed", extra={"check": error})
        raise StartupSecurityError(
            f"Startup blocked: {len(errors)} security check(s) failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.info(
        "Startup security checks passed",
        extra={"environment": environment, "checks_run": 2},
    )


def _check_bot_token(
    settings: Settings,
    app_config: AppConfig,
    is_production: bool,
    errors: list[str],
) -> None:
    """The bot token signs every login; it must be present and long enough."""
    token = settings.telegram_bot_token
    min_length = app_config.security.secrets_validation.bot_token_min_length

    if not token:
        if is_production:
            errors.append("TELEGRAM_BOT_TOKEN is empty")
        else:
            logger.warning("TELEGRAM_BOT_TOKEN is empty, Telegram login will be rejected")
        return

    if is_production and len(token) < min_length:
        errors.append(
            f"TELEGRAM_BOT_TOKEN is {len(token)} chars, minimum is {min_length}"
        )


def _check_production_safety(app_config: AppConfig, is_production: bool, errors: list[str]) -> None:
    """Validate production environment safety constraints."""
    if not is_production:
        return

    app = app_config.application
    if app.debug:
        errors.append("debug is true in production environment")

    if app.docs_enabled:
        errors.append("docs_enabled is true in production environment")

    if not app_config.security.session.secure_cookie:
        errors.append("session.secure_cookie is false in production environment")

    localhost_origins = [o for o in app.cors.origins if "localhost" in o]
    if localhost_origins:
        errors.append(
            f"CORS origins contain localhost in production: {localhost_origins}"
        )
