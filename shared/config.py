"""
Shared configuration management for the Users service.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = Field(default="local", validation_alias="USERS_ENV")
    log_level: str = Field(default="info", validation_alias="USERS_LOG_LEVEL")

    # External services
    mongo_uri: str = Field(
        default="mongodb://localhost:27017/users",
        validation_alias="MONGO_URI",
    )
    mongo_database: str = Field(
        default="users",
        validation_alias="USERS_MONGO_DATABASE",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias="USERS_REDIS_URL",
    )

    # Feature toggles
    validation_enabled: bool = Field(
        default=True,
        validation_alias="USERS_VALIDATION_ENABLED",
    )
    unique_email_index: bool = Field(
        default=True,
        validation_alias="USERS_UNIQUE_EMAIL_INDEX",
    )
    cache_enabled: bool = Field(
        default=True,
        validation_alias="USERS_CACHE_ENABLED",
    )

    # Caching
    cache_ttl_seconds: int = Field(
        default=3600,
        gt=0,
        validation_alias="USERS_CACHE_TTL_SECONDS",
    )
    cache_read_error_policy: Literal["raise", "miss"] = Field(
        default="raise",
        validation_alias="USERS_CACHE_READ_ERROR_POLICY",
    )


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int = Field(default=5000, validation_alias="PORT")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")


def get_config(service_name: str, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
