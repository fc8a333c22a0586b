"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./blog_notifications.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key used to verify the JWT access tokens issued by the blog",
        min_length=1,
    )
    jwt_algorithm: str = Field(default="HS256", description="Algorithm of the access tokens")
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending notification emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification emails",
        min_length=3,
    )
    app_timezone: str = Field(
        default="Asia/Shanghai",
        description="Timezone used to store naive timestamps and as the default user timezone",
    )
    site_name: str = Field(default="Blog", description="Name shown in email subjects")
    site_url: str = Field(
        default="http://localhost:5173",
        description="Public URL of the blog frontend, used for links inside emails",
    )
    notification_retention_days: int = Field(
        default=90, gt=0, description="Days a notification is kept before the retention sweep"
    )
    digest_retention_days: int = Field(
        default=30, gt=0, description="Days a sent digest queue row is kept"
    )
    digest_send_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Upper bound for a single digest email send"
    )
    preference_cache_ttl_seconds: int = Field(
        default=0,
        ge=0,
        description="TTL of the in-process preference cache; 0 disables caching",
    )
    preference_cache_max_entries: int = Field(
        default=10_000,
        gt=0,
        description="Maximum number of users kept in the preference cache",
    )
    admin_broadcast_limit: int = Field(
        default=1000, gt=0, description="Maximum recipients of a single admin broadcast"
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
