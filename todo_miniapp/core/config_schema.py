"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    DatabaseSchema     → database.yaml
    LoggingSchema      → logging.yaml
    FeaturesSchema     → features.yaml
    SecuritySchema     → security.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class TelegramAppSchema(_StrictBase):
    bot_username: str | None = None
    app_url: str | None = None


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    telegram: TelegramAppSchema


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    driver: str
    host: str
    port: int
    name: str
    user: str
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool

    @property
    def is_sqlite(self) -> bool:
        return self.driver.startswith("sqlite")


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: Literal["json", "console"]
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    security_startup_checks_enabled: bool
    api_request_logging: bool
    database_create_all: bool


# =============================================================================
# security.yaml
# =============================================================================


class TelegramAuthSchema(_StrictBase):
    max_age_seconds: int = Field(gt=0)


class SessionSchema(_StrictBase):
    cookie_name: str
    ttl_seconds: int = Field(gt=0)
    sliding: bool
    secure_cookie: bool
    same_site: Literal["lax", "strict", "none"]


class SecretsValidationSchema(_StrictBase):
    bot_token_min_length: int


class SecuritySchema(_StrictBase):
    telegram_auth: TelegramAuthSchema
    session: SessionSchema
    allowed_users: list[int]
    secrets_validation: SecretsValidationSchema
