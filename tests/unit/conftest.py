"""
Unit Test Fixtures.

Fixtures for unit tests - external dependencies are mocked and config is
stubbed with real Pydantic schema objects. Unit tests never touch a
real database.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from todo_miniapp.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
    SecuritySchema,
)


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = TaskService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.get = AsyncMock()
    return session


# =============================================================================
# Config Fixtures
# =============================================================================


def build_app_config(
    environment: str = "development",
    debug: bool = True,
    docs_enabled: bool = True,
    secure_cookie: bool = False,
    cors_origins: list[str] | None = None,
    allowed_users: list[int] | None = None,
) -> SimpleNamespace:
    """Stand-in for AppConfig built from real schema objects."""
    return SimpleNamespace(
        application=ApplicationSchema(
            name="Test App",
            version="1.0.0",
            description="Test application",
            environment=environment,
            debug=debug,
            docs_enabled=docs_enabled,
            server={"host": "127.0.0.1", "port": 8000},
            cors={"origins": ["http://localhost:3000"] if cors_origins is None else cors_origins},
            telegram={"bot_username": "todo_test_bot", "app_url": None},
        ),
        database=DatabaseSchema(
            driver="sqlite",
            host="localhost",
            port=5432,
            name=":memory:",
            user="test",
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=1800,
            echo=False,
        ),
        logging=LoggingSchema(
            level="DEBUG",
            format="console",
            handlers={
                "console": {"enabled": True},
                "file": {
                    "enabled": False,
                    "path": "logs/test.jsonl",
                    "max_bytes": 1024,
                    "backup_count": 1,
                },
            },
        ),
        features=FeaturesSchema(
            security_startup_checks_enabled=True,
            api_request_logging=False,
            database_create_all=False,
        ),
        security=SecuritySchema(
            telegram_auth={"max_age_seconds": 86400},
            session={
                "cookie_name": "todo_session",
                "ttl_seconds": 86400,
                "sliding": False,
                "secure_cookie": secure_cookie,
                "same_site": "lax",
            },
            allowed_users=allowed_users or [],
            secrets_validation={"bot_token_min_length": 30},
        ),
    )


@pytest.fixture
def make_app_config():
    """
    Factory for config stand-ins.

    Usage:
        def test_prod(make_app_config):
            config = make_app_config(environment="production", debug=False)
    """
    return build_app_config


@pytest.fixture
def app_config() -> SimpleNamespace:
    """Development configuration."""
    return build_app_config()


@pytest.fixture
def production_config() -> SimpleNamespace:
    """Production configuration that passes every startup check."""
    return build_app_config(
        environment="production",
        debug=False,
        docs_enabled=False,
        secure_cookie=True,
        cors_origins=["https://todo.example.com"],
    )


@pytest.fixture
def mock_settings() -> SimpleNamespace:
    """Secrets with a production-length bot token."""
    return SimpleNamespace(
        telegram_bot_token="1234567890:" + "A" * 35,
        db_password="test_pass",
    )


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.logger", mock_logger):
                ...
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
