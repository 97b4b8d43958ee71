"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        SERVMON_DB_HOST: Database host (default: localhost)
        SERVMON_DB_PORT: Database port (default: 5432)
        SERVMON_DB_DATABASE: Database name (default: servmon)
        SERVMON_DB_USERNAME: Database user (default: servmon)
        SERVMON_DB_PASSWORD: Database password (required in production)
        SERVMON_DB_POOL_SIZE: Connections kept in the pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="SERVMON_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="servmon", description="Database name")
    username: str = Field(default="servmon", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_size: int = Field(
        default=10,
        description="Connections kept in the pool",
        ge=1,
        le=100,
    )

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Bearer token settings.

    Either ``jwt_secret`` (shared HMAC secret) or ``issuer_url`` (OIDC
    provider publishing a JWKS) must be set.

    Environment variables:
        SERVMON_AUTH_JWT_SECRET: Shared signing secret
        SERVMON_AUTH_ALGORITHM: HMAC algorithm (default: HS256)
        SERVMON_AUTH_ISSUER_URL: OIDC issuer URL
        SERVMON_AUTH_AUDIENCE: Expected audience (optional)
        SERVMON_AUTH_USER_ID_CLAIM: Claim holding the user id (default: sub)
    """

    model_config = SettingsConfigDict(
        env_prefix="SERVMON_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr | None = Field(default=None, description="Signing secret")
    algorithm: str = Field(default="HS256", description="HMAC algorithm")
    issuer_url: str | None = Field(default=None, description="OIDC issuer URL")
    audience: str | None = Field(default=None, description="Expected audience")
    user_id_claim: str = Field(default="sub", description="User id claim")

    @model_validator(mode="after")
    def validate_verification_mode(self) -> "AuthSettings":
        """Require at least one way of verifying signatures."""
        if self.jwt_secret is None and self.issuer_url is None:
            raise ValueError("Set SERVMON_AUTH_JWT_SECRET or SERVMON_AUTH_ISSUER_URL")
        return self


class SmtpSettings(BaseSettings):
    """Outgoing mail settings for the EMAIL channel.

    Environment variables:
        SERVMON_SMTP_HOST, SERVMON_SMTP_PORT, SERVMON_SMTP_USERNAME,
        SERVMON_SMTP_PASSWORD: Mail relay and credentials
        SERVMON_SMTP_FROM_ADDRESS: Sender address (default: noreply@servmon.app)
        SERVMON_SMTP_FROM_NAME: Sender display name (default: ServMon)
    """

    model_config = SettingsConfigDict(
        env_prefix="SERVMON_SMTP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str | None = Field(default=None, description="SMTP host")
    port: int | None = Field(default=None, description="SMTP port")
    username: str | None = Field(default=None, description="SMTP username")
    password: SecretStr | None = Field(default=None, description="SMTP password")
    from_address: str = Field(default="noreply@servmon.app", description="Sender")
    from_name: str = Field(default="ServMon", description="Sender display name")

    @property
    def is_complete(self) -> bool:
        """True when every value needed to open a session is present."""
        return bool(self.host and self.port and self.username and self.password)

    @property
    def use_implicit_tls(self) -> bool:
        """Port 465 speaks TLS from the first byte; others use STARTTLS."""
        return self.port == 465


class NotificationSettings(BaseSettings):
    """Notification dispatch settings.

    Environment variables:
        SERVMON_NOTIFY_DELIVERY_TIMEOUT_SECONDS: Per-attempt timeout (default: 15)
        SERVMON_NOTIFY_EMAIL_CONCURRENCY: Concurrent SMTP deliveries (default: 4)
        SERVMON_NOTIFY_WEBHOOK_CONCURRENCY: Concurrent webhook calls (default: 16)
        SERVMON_NOTIFY_TIMEZONE: Zone used to render timestamps (default: Europe/Paris)
        SERVMON_NOTIFY_TIMESTAMP_FORMAT: strftime pattern (default: %d/%m/%Y %H:%M:%S)
    """

    model_config = SettingsConfigDict(
        env_prefix="SERVMON_NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    delivery_timeout_seconds: float = Field(default=15.0, gt=0, le=300)
    email_concurrency: int = Field(default=4, ge=1, le=100)
    webhook_concurrency: int = Field(default=16, ge=1, le=500)
    timezone: str = Field(default="Europe/Paris")
    timestamp_format: str = Field(default="%d/%m/%Y %H:%M:%S")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject unknown IANA zone names at startup."""
        try:
            ZoneInfo(value)
        except ZoneInfoNotFoundError as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value


class OutboxSettings(BaseSettings):
    """Outbox worker settings.

    Environment variables:
        SERVMON_OUTBOX_ENABLED: Run the worker in-process (default: true)
        SERVMON_OUTBOX_POLL_INTERVAL_SECONDS: Fallback poll period (default: 30)
        SERVMON_OUTBOX_BATCH_SIZE: Entries per batch (default: 100)
        SERVMON_OUTBOX_MAX_RETRIES: Attempts before dead-lettering (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="SERVMON_OUTBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True)
    poll_interval_seconds: int = Field(default=30, ge=1)
    batch_size: int = Field(default=100, ge=1, le=1000)
    max_retries: int = Field(default=5, ge=1)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="SERVMON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="ServMon API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Minimum log level")
    default_group_name: str = Field(
        default="Main group",
        description="Group created for the first registered user",
    )

    @property
    def database(self) -> DatabaseSettings:
        return get_database_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached authentication settings."""
    return AuthSettings()


@lru_cache
def get_smtp_settings() -> SmtpSettings:
    """Get cached SMTP settings."""
    return SmtpSettings()


@lru_cache
def get_notification_settings() -> NotificationSettings:
    """Get cached notification dispatch settings."""
    return NotificationSettings()


@lru_cache
def get_outbox_settings() -> OutboxSettings:
    """Get cached outbox worker settings."""
    return OutboxSettings()
